"""Admin financial query schemas."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    """
    Aggregated ledger totals over active enrollments in the caller's scope.
    Returned by GET /api/v1/admin/dashboard.
    """

    active_student_count: int = Field(..., ge=0, description="Active students registered at the branch(es)")
    active_enrollment_count: int = Field(..., ge=0, description="Enrollments with the active flag set")
    total_billed: Decimal = Field(..., description="Sum of total_amount")
    total_paid: Decimal = Field(..., description="Sum of paid_amount")
    total_pending: Decimal = Field(..., description="total_billed - total_paid")


class StudentDebt(BaseModel):
    student_id: UUID
    full_name: str
    total_debt: Decimal


class EnrollmentFinancialStatus(BaseModel):
    enrollment_id: UUID
    student_name: str
    course_name: str
    total_amount: Decimal
    paid_amount: Decimal
    balance: Decimal
    active: bool


class CourseFinancialSummary(BaseModel):
    course_id: UUID
    course_name: str
    total_billed: Decimal
    total_paid: Decimal
    total_pending: Decimal
    enrollment_count: int = Field(..., ge=0)
    active: bool


class MonthlyIncome(BaseModel):
    """One (month, branch) row of the monthly income report."""

    month: str
    year: int
    month_number: int = Field(..., ge=1, le=12)
    total_income: Decimal = Field(..., description="Confirmed payments of the month's enrollments")
    payment_count: int = Field(..., ge=0)
    branch_id: UUID
    branch_name: str
    total_sales: Decimal = Field(..., description="Sum of total_amount")
    total_paid: Decimal = Field(..., description="Sum of paid_amount")
    total_pending: Decimal = Field(..., description="Sum of total_amount - paid_amount")


class ReconciliationEntry(BaseModel):
    """paid_amount compared with the sum of CONFIRMADO payments for one enrollment."""

    enrollment_id: UUID
    branch_id: Optional[UUID] = None
    paid_amount: Decimal
    confirmed_total: Decimal
    difference: Decimal
    consistent: bool
