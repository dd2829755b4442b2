from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime
from decimal import Decimal

from app.models.enums import PaymentType, PaymentStatus


class PaymentCreate(BaseModel):
    """
    Register a payment against an enrollment.

    ``amount`` is ignored for PAGO_TOTAL: the payment settles whatever is
    pending. Sign checks happen in the service so they answer 400, not 422.
    """
    enrollment_id: UUID
    payment_method_id: UUID
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    type: PaymentType
    transaction_reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)


class PaymentResponse(BaseModel):
    id: UUID
    amount: Decimal
    payment_date: datetime
    type: PaymentType
    status: PaymentStatus
    enrollment_id: UUID
    branch_id: Optional[UUID] = None
    payment_method_id: UUID
    payment_method_name: str
    transaction_reference: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_payment(cls, payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            amount=payment.amount,
            payment_date=payment.payment_date,
            type=payment.type,
            status=payment.status,
            enrollment_id=payment.enrollment_id,
            branch_id=payment.branch_id,
            payment_method_id=payment.payment_method_id,
            payment_method_name=payment.payment_method.name,
            transaction_reference=payment.transaction_reference,
            notes=payment.notes,
        )


class PaymentMethodResponse(BaseModel):
    id: UUID
    name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
