"""Financial Query Service - read-only ledger aggregations under access scope"""

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.models.academic import Student
from app.models.branch import Branch
from app.models.enrollment import Enrollment
from app.schemas.admin import (
    CourseFinancialSummary,
    DashboardStats,
    EnrollmentFinancialStatus,
    MonthlyIncome,
    ReconciliationEntry,
    StudentDebt,
)
from app.services.access_scope import Actor, ensure_visible, resolve_scope
from app.services.ledger_store import LedgerStore
from app.utils.money import ZERO, to_money
from app.utils.time import get_local_today

logger = logging.getLogger(__name__)

# Fixed report labels, index 0 = January
MONTH_NAMES = (
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
)


def month_name(month_number: int) -> str:
    return MONTH_NAMES[month_number - 1]


class FinanceService:
    """Service layer for admin financial queries"""

    @staticmethod
    async def dashboard(
        db: AsyncSession,
        actor: Actor,
        branch_id: Optional[UUID] = None,
    ) -> DashboardStats:
        """
        Totals over active enrollments in scope. An empty scope yields zeros.
        """
        scope = resolve_scope(actor, branch_id)
        if scope.is_empty:
            return DashboardStats(
                active_student_count=0,
                active_enrollment_count=0,
                total_billed=ZERO,
                total_paid=ZERO,
                total_pending=ZERO,
            )

        students_query = scope.apply(
            select(func.count(Student.id)).where(Student.is_active == True),  # noqa: E712
            Student.branch_id,
        )
        students_count = await db.scalar(students_query)

        enrollments_query = scope.apply(
            select(
                func.count(Enrollment.id),
                func.coalesce(func.sum(Enrollment.total_amount), 0),
                func.coalesce(func.sum(Enrollment.paid_amount), 0),
            ).where(Enrollment.is_active == True),  # noqa: E712
            Enrollment.branch_id,
        )
        enrollments_count, billed, paid = (await db.execute(enrollments_query)).one()

        total_billed = to_money(billed)
        total_paid = to_money(paid)
        return DashboardStats(
            active_student_count=students_count or 0,
            active_enrollment_count=enrollments_count or 0,
            total_billed=total_billed,
            total_paid=total_paid,
            total_pending=total_billed - total_paid,
        )

    @staticmethod
    async def students_with_debt(
        db: AsyncSession,
        actor: Actor,
        branch_id: Optional[UUID] = None,
    ) -> List[StudentDebt]:
        """
        Students owing money on at least one active enrollment, largest debt first.
        Scoped by the branch of the enrollments.
        """
        scope = resolve_scope(actor, branch_id)
        if scope.is_empty:
            return []

        debt = func.sum(Enrollment.total_amount - Enrollment.paid_amount)
        stmt = (
            select(Student.id, Student.first_name, Student.last_name, debt)
            .join(Enrollment, Enrollment.student_id == Student.id)
            .where(
                Enrollment.is_active == True,  # noqa: E712
                Enrollment.total_amount > Enrollment.paid_amount,
            )
            .group_by(Student.id, Student.first_name, Student.last_name)
            .order_by(debt.desc(), Student.last_name, Student.first_name)
        )
        result = await db.execute(scope.apply(stmt, Enrollment.branch_id))
        return [
            StudentDebt(
                student_id=student_id,
                full_name=f"{first_name} {last_name}",
                total_debt=to_money(total_debt),
            )
            for student_id, first_name, last_name, total_debt in result.all()
        ]

    @staticmethod
    async def enrollment_financial_status(
        db: AsyncSession,
        actor: Actor,
        enrollment_id: UUID,
    ) -> EnrollmentFinancialStatus:
        """
        Balance of one enrollment, from its running paid_amount.

        Raises:
            NotFoundError: enrollment does not exist
            ForbiddenError: enrollment outside the caller's scope
        """
        scope = resolve_scope(actor)
        enrollment = await LedgerStore.get_enrollment(db, enrollment_id, with_details=True)
        if not enrollment:
            raise NotFoundError("Enrollment", enrollment_id)
        ensure_visible(scope, enrollment.branch_id, "Enrollment")

        total = to_money(enrollment.total_amount)
        paid = to_money(enrollment.paid_amount)
        return EnrollmentFinancialStatus(
            enrollment_id=enrollment.id,
            student_name=enrollment.student.full_name,
            course_name=enrollment.course.name,
            total_amount=total,
            paid_amount=paid,
            balance=total - paid,
            active=enrollment.is_active,
        )

    @staticmethod
    async def course_financial_summary(
        db: AsyncSession,
        actor: Actor,
        course_id: UUID,
        branch_id: Optional[UUID] = None,
    ) -> CourseFinancialSummary:
        """
        Billed/paid/pending across the course's enrollments in scope.

        Raises:
            NotFoundError: course does not exist
            InvalidArgumentError: the course has no enrollments
        """
        scope = resolve_scope(actor, branch_id)
        course = await LedgerStore.get_course(db, course_id)
        if not course:
            raise NotFoundError("Course", course_id)

        if scope.is_empty:
            return CourseFinancialSummary(
                course_id=course.id,
                course_name=course.name,
                total_billed=ZERO,
                total_paid=ZERO,
                total_pending=ZERO,
                enrollment_count=0,
                active=course.is_active,
            )

        stmt = scope.apply(
            select(
                func.count(Enrollment.id),
                func.sum(Enrollment.total_amount),
                func.sum(Enrollment.paid_amount),
            ).where(Enrollment.course_id == course_id),
            Enrollment.branch_id,
        )
        count, billed, paid = (await db.execute(stmt)).one()
        if not count:
            raise InvalidArgumentError("Course has no enrollments")

        total_billed = to_money(billed)
        total_paid = to_money(paid)
        return CourseFinancialSummary(
            course_id=course.id,
            course_name=course.name,
            total_billed=total_billed,
            total_paid=total_paid,
            total_pending=total_billed - total_paid,
            enrollment_count=count,
            active=course.is_active,
        )

    @staticmethod
    async def monthly_income_report(
        db: AsyncSession,
        actor: Actor,
        year: Optional[int] = None,
        branch_id: Optional[UUID] = None,
    ) -> List[MonthlyIncome]:
        """
        One row per (month, branch) for enrollments dated in ``year``.

        Sales, paid and pending come from the enrollments; income and payment
        count from their CONFIRMADO payments. Each enrollment contributes its
        amounts once however many payments it has. Enrollments without a
        branch are left out. Rows are ordered by month descending, then
        branch name.
        """
        if year is None:
            year = settings.DEFAULT_REPORT_YEAR or get_local_today().year

        scope = resolve_scope(actor, branch_id)
        if scope.is_empty:
            return []

        stmt = (
            select(
                Enrollment.id,
                Enrollment.enrollment_date,
                Enrollment.total_amount,
                Enrollment.paid_amount,
                Branch.id,
                Branch.name,
            )
            .join(Branch, Enrollment.branch_id == Branch.id)
            .where(
                Enrollment.enrollment_date >= date(year, 1, 1),
                Enrollment.enrollment_date <= date(year, 12, 31),
            )
        )
        rows = (await db.execute(scope.apply(stmt, Enrollment.branch_id))).all()
        income = await LedgerStore.confirmed_totals_by_enrollment(db, [row[0] for row in rows])

        buckets: Dict[Tuple[int, UUID], dict] = {}
        for enrollment_id, enrolled_on, total, paid, row_branch_id, branch_name in rows:
            key = (enrolled_on.month, row_branch_id)
            bucket = buckets.setdefault(key, {
                "branch_name": branch_name,
                "total_income": ZERO,
                "payment_count": 0,
                "total_sales": ZERO,
                "total_paid": ZERO,
            })
            bucket["total_sales"] += to_money(total)
            bucket["total_paid"] += to_money(paid)
            confirmed = income.get(enrollment_id)
            if confirmed:
                bucket["total_income"] += confirmed["total"]
                bucket["payment_count"] += confirmed["count"]

        report = [
            MonthlyIncome(
                month=month_name(month_number),
                year=year,
                month_number=month_number,
                total_income=bucket["total_income"],
                payment_count=bucket["payment_count"],
                branch_id=row_branch_id,
                branch_name=bucket["branch_name"],
                total_sales=bucket["total_sales"],
                total_paid=bucket["total_paid"],
                total_pending=bucket["total_sales"] - bucket["total_paid"],
            )
            for (month_number, row_branch_id), bucket in buckets.items()
        ]
        report.sort(key=lambda r: r.branch_name)
        report.sort(key=lambda r: r.month_number, reverse=True)
        return report

    @staticmethod
    async def reconcile(
        db: AsyncSession,
        actor: Actor,
        enrollment_id: Optional[UUID] = None,
        branch_id: Optional[UUID] = None,
        only_inconsistent: bool = False,
    ) -> List[ReconciliationEntry]:
        """
        Compare each enrollment's paid_amount with the sum of its CONFIRMADO
        payments. Diagnostic only; nothing is corrected.

        Raises:
            NotFoundError: ``enrollment_id`` given and absent
            ForbiddenError: that enrollment is outside the caller's scope
        """
        if enrollment_id is not None:
            scope = resolve_scope(actor)
            enrollment = await LedgerStore.get_enrollment(db, enrollment_id)
            if not enrollment:
                raise NotFoundError("Enrollment", enrollment_id)
            ensure_visible(scope, enrollment.branch_id, "Enrollment")
            rows = [(enrollment.id, enrollment.branch_id, enrollment.paid_amount)]
        else:
            scope = resolve_scope(actor, branch_id)
            if scope.is_empty:
                return []
            stmt = scope.apply(
                select(Enrollment.id, Enrollment.branch_id, Enrollment.paid_amount),
                Enrollment.branch_id,
            ).order_by(Enrollment.enrollment_date)
            rows = (await db.execute(stmt)).all()

        totals = await LedgerStore.confirmed_totals_by_enrollment(db, [row[0] for row in rows])

        entries = []
        for row_id, row_branch_id, paid in rows:
            paid_amount = to_money(paid)
            confirmed = totals.get(row_id, {}).get("total", ZERO)
            difference = paid_amount - confirmed
            entry = ReconciliationEntry(
                enrollment_id=row_id,
                branch_id=row_branch_id,
                paid_amount=paid_amount,
                confirmed_total=confirmed,
                difference=difference,
                consistent=difference == ZERO,
            )
            if not entry.consistent:
                logger.warning(
                    "Ledger drift detected",
                    extra={
                        "enrollment_id": str(row_id),
                        "paid_amount": str(paid_amount),
                        "confirmed_total": str(confirmed),
                    },
                )
            if entry.consistent and only_inconsistent:
                continue
            entries.append(entry)
        return entries
