from typing import Optional
from pydantic import BaseModel, ConfigDict
from uuid import UUID
from datetime import date
from decimal import Decimal

from app.models.enums import EnrollmentStatus, EnrollmentPaymentState


class EnrollmentCreate(BaseModel):
    student_id: UUID
    course_id: UUID
    # Honoured for SUPER_ADMIN only; admins always enroll into their own branch
    branch_id: Optional[UUID] = None


class EnrollmentResponse(BaseModel):
    id: UUID
    student_id: UUID
    student_name: str
    student_document: str
    student_email: Optional[str] = None
    course_id: UUID
    course_name: str
    branch_id: Optional[UUID] = None
    branch_name: Optional[str] = None
    enrollment_date: date
    status: EnrollmentStatus
    total_amount: Decimal
    paid_amount: Decimal
    active: bool

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_enrollment(cls, enrollment) -> "EnrollmentResponse":
        student = enrollment.student
        course = enrollment.course
        return cls(
            id=enrollment.id,
            student_id=student.id,
            student_name=student.full_name,
            student_document=student.document_number,
            student_email=student.email,
            course_id=course.id,
            course_name=course.name,
            branch_id=enrollment.branch_id,
            branch_name=enrollment.branch.name if enrollment.branch else None,
            enrollment_date=enrollment.enrollment_date,
            status=enrollment.status,
            total_amount=enrollment.total_amount,
            paid_amount=enrollment.paid_amount,
            active=enrollment.is_active,
        )


class EnrollmentSummary(BaseModel):
    """Balance snapshot of one enrollment"""
    enrollment_id: UUID
    total_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    status: EnrollmentPaymentState
