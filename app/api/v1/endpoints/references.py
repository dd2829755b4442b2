from typing import Any, List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.services.ledger_store import LedgerStore
from app.schemas.payment import PaymentMethodResponse
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("/payment-methods", response_model=SuccessResponse[List[PaymentMethodResponse]])
async def get_payment_methods(
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Active payment methods (Efectivo, Transferencia...).
    """
    methods = await LedgerStore.list_payment_methods(db, active_only=True)
    return SuccessResponse(data=methods)
