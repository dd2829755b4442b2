from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.services.access_scope import Actor
from app.services.finance_service import FinanceService
from app.services.payment_service import PaymentService
from app.schemas.admin import MonthlyIncome
from app.schemas.payment import PaymentCreate, PaymentResponse
from app.schemas.responses import SuccessResponse, PaginatedResponse, paginate

router = APIRouter()


@router.post("", response_model=SuccessResponse[PaymentResponse], status_code=status.HTTP_201_CREATED)
async def register_payment(
    payment_in: PaymentCreate,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Register an ABONO or PAGO_TOTAL against an enrollment.
    """
    payment = await PaymentService.register_payment(
        db,
        actor,
        enrollment_id=payment_in.enrollment_id,
        amount=payment_in.amount,
        payment_type=payment_in.type,
        payment_method_id=payment_in.payment_method_id,
        transaction_reference=payment_in.transaction_reference,
        notes=payment_in.notes,
    )
    return SuccessResponse(data=payment, message="Payment registered")


@router.get("", response_model=PaginatedResponse[PaymentResponse])
async def list_payments(
    branch_id: Optional[UUID] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Payments in scope, newest first. ``branch_id`` only narrows for super admins.
    """
    payments = await PaymentService.list_payments(db, actor, branch_id=branch_id)
    return PaginatedResponse(**paginate(payments, page, page_size))


@router.get("/monthly-income", response_model=SuccessResponse[List[MonthlyIncome]])
async def monthly_income(
    year: Optional[int] = Query(None, ge=2000, le=9999),
    branch_id: Optional[UUID] = None,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Income, sales and pending balance per month and branch.
    """
    report = await FinanceService.monthly_income_report(db, actor, year=year, branch_id=branch_id)
    return SuccessResponse(data=report)


@router.get("/enrollment/{enrollment_id}", response_model=SuccessResponse[List[PaymentResponse]])
async def get_payments_by_enrollment(
    enrollment_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    payments = await PaymentService.get_payments_by_enrollment(db, actor, enrollment_id)
    return SuccessResponse(data=payments)


@router.delete("/{payment_id}", response_model=SuccessResponse[None])
async def cancel_payment(
    payment_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Void a payment. The row is kept with status ANULADO.
    """
    await PaymentService.cancel_payment(db, actor, payment_id)
    return SuccessResponse(data=None, message="Payment voided")
