"""Payments and Payment Methods"""

from sqlalchemy import CheckConstraint, Column, String, DateTime, Numeric, ForeignKey, Enum, Uuid
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, BranchScopedMixin, StatusMixin
from app.models.enums import PaymentType, PaymentStatus


class PaymentMethod(BaseModel, StatusMixin):
    """
    How money was received (cash, transfer, card...).
    """
    __tablename__ = "payment_methods"

    name = Column(String(50), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<PaymentMethod {self.name}>"


class Payment(BaseModel, BranchScopedMixin):
    """
    Append-only evidence for an enrollment's paid_amount.

    branch_id is copied from the enrollment when the payment is registered.
    Payments are never deleted; voiding flips status to ANULADO once.
    """
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )

    enrollment_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("enrollments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    payment_method_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("payment_methods.id", ondelete="RESTRICT"),
        nullable=False
    )
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(DateTime, nullable=False, index=True)
    type = Column(Enum(PaymentType, name="payment_type"), nullable=False)
    status = Column(
        Enum(PaymentStatus, name="payment_status"),
        default=PaymentStatus.CONFIRMADO,
        nullable=False,
        index=True
    )
    transaction_reference = Column(String(100), nullable=True)
    notes = Column(String(500), nullable=True)

    # Relationships
    enrollment = relationship("Enrollment", back_populates="payments")
    payment_method = relationship("PaymentMethod", lazy="joined", innerjoin=True)

    @property
    def is_voided(self) -> bool:
        return self.status == PaymentStatus.ANULADO

    def __repr__(self) -> str:
        return f"<Payment {self.amount} {self.type} - {self.status}>"
