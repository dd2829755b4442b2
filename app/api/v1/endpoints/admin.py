from typing import Any, List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.services.access_scope import Actor
from app.services.finance_service import FinanceService
from app.schemas.admin import (
    CourseFinancialSummary,
    DashboardStats,
    EnrollmentFinancialStatus,
    ReconciliationEntry,
    StudentDebt,
)
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("/dashboard", response_model=SuccessResponse[DashboardStats])
async def get_dashboard(
    branch_id: Optional[UUID] = None,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Active students, active enrollments and billed/paid/pending totals.
    """
    stats = await FinanceService.dashboard(db, actor, branch_id=branch_id)
    return SuccessResponse(data=stats)


@router.get("/students-with-debt", response_model=SuccessResponse[List[StudentDebt]])
async def get_students_with_debt(
    branch_id: Optional[UUID] = None,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    debtors = await FinanceService.students_with_debt(db, actor, branch_id=branch_id)
    return SuccessResponse(data=debtors)


@router.get(
    "/enrollments/{enrollment_id}/financial-status",
    response_model=SuccessResponse[EnrollmentFinancialStatus],
)
async def get_enrollment_financial_status(
    enrollment_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    status = await FinanceService.enrollment_financial_status(db, actor, enrollment_id)
    return SuccessResponse(data=status)


@router.get(
    "/courses/{course_id}/financial-summary",
    response_model=SuccessResponse[CourseFinancialSummary],
)
async def get_course_financial_summary(
    course_id: UUID,
    branch_id: Optional[UUID] = None,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    summary = await FinanceService.course_financial_summary(db, actor, course_id, branch_id=branch_id)
    return SuccessResponse(data=summary)


@router.get("/reconciliation", response_model=SuccessResponse[List[ReconciliationEntry]])
async def get_reconciliation(
    enrollment_id: Optional[UUID] = None,
    branch_id: Optional[UUID] = None,
    only_inconsistent: bool = False,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Compare paid_amount with confirmed payments. Read-only diagnostic.
    """
    entries = await FinanceService.reconcile(
        db,
        actor,
        enrollment_id=enrollment_id,
        branch_id=branch_id,
        only_inconsistent=only_inconsistent,
    )
    return SuccessResponse(data=entries)
