"""Enrollment Model - owner of the running balance"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Date, Numeric, ForeignKey, Enum, Uuid
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, BranchScopedMixin, StatusMixin
from app.models.enums import EnrollmentStatus, EnrollmentPaymentState


class Enrollment(BaseModel, BranchScopedMixin, StatusMixin):
    """
    A student's enrollment in a course.

    total_amount is the course price at enrollment time and never changes.
    paid_amount is the running total of confirmed payments and is only
    written by PaymentService; 0 <= paid_amount <= total_amount holds after
    every committed operation.
    """
    __tablename__ = "enrollments"
    __table_args__ = (
        CheckConstraint("paid_amount >= 0", name="ck_enrollments_paid_non_negative"),
        CheckConstraint("paid_amount <= total_amount", name="ck_enrollments_paid_le_total"),
    )

    student_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("students.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    course_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    enrollment_date = Column(Date, nullable=False, index=True)
    status = Column(
        Enum(EnrollmentStatus, name="enrollment_status"),
        default=EnrollmentStatus.ACTIVE,
        nullable=False,
        index=True
    )
    total_amount = Column(Numeric(10, 2), nullable=False)
    paid_amount = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)

    # Relationships
    student = relationship("Student", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
    branch = relationship("Branch")
    payments = relationship(
        "Payment",
        back_populates="enrollment",
        order_by="Payment.payment_date",
    )

    @property
    def pending_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount

    @property
    def accepts_payments(self) -> bool:
        """Payments are only taken while the enrollment is active and in progress"""
        return bool(self.is_active) and self.status == EnrollmentStatus.ACTIVE

    @property
    def payment_state(self) -> EnrollmentPaymentState:
        if self.pending_amount == 0:
            return EnrollmentPaymentState.PAGADO
        if self.paid_amount > 0:
            return EnrollmentPaymentState.EN_PROGRESO
        return EnrollmentPaymentState.PENDIENTE

    def __repr__(self) -> str:
        return f"<Enrollment {self.id} {self.paid_amount}/{self.total_amount}>"
