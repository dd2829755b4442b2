"""Ledger Store - persistence access for enrollments, payments and lookups"""

from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.academic import Student, Course
from app.models.branch import Branch
from app.models.enrollment import Enrollment
from app.models.enums import PaymentStatus
from app.models.payment import Payment, PaymentMethod
from app.services.access_scope import ScopeFilter
from app.utils.money import to_money


class LedgerStore:
    """Lookups and writes the ledger services build on. No business rules here."""

    @staticmethod
    async def get_enrollment(
        db: AsyncSession,
        enrollment_id: UUID,
        for_update: bool = False,
        with_details: bool = False,
    ) -> Optional[Enrollment]:
        """
        Fetch an enrollment by id.

        Args:
            db: Database session
            enrollment_id: Enrollment ID
            for_update: lock the row until the transaction ends (balance writes)
            with_details: eager-load student, course and branch for display fields

        Returns:
            Enrollment or None if not found
        """
        stmt = select(Enrollment).where(Enrollment.id == enrollment_id)
        if with_details:
            stmt = stmt.options(
                selectinload(Enrollment.student),
                selectinload(Enrollment.course),
                selectinload(Enrollment.branch),
            )
        if for_update:
            stmt = stmt.with_for_update(of=Enrollment)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_payment(
        db: AsyncSession,
        payment_id: UUID,
        for_update: bool = False,
    ) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.id == payment_id)
        if for_update:
            stmt = stmt.with_for_update(of=Payment)
        result = await db.execute(stmt)
        return result.unique().scalar_one_or_none()

    @staticmethod
    async def get_payment_method(db: AsyncSession, method_id: UUID) -> Optional[PaymentMethod]:
        return await db.get(PaymentMethod, method_id)

    @staticmethod
    async def list_payment_methods(db: AsyncSession, active_only: bool = True) -> List[PaymentMethod]:
        stmt = select(PaymentMethod).order_by(PaymentMethod.name)
        if active_only:
            stmt = stmt.where(PaymentMethod.is_active == True)  # noqa: E712
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def get_student(db: AsyncSession, student_id: UUID) -> Optional[Student]:
        return await db.get(Student, student_id)

    @staticmethod
    async def get_course(db: AsyncSession, course_id: UUID) -> Optional[Course]:
        return await db.get(Course, course_id)

    @staticmethod
    async def get_branch(db: AsyncSession, branch_id: UUID) -> Optional[Branch]:
        return await db.get(Branch, branch_id)

    @staticmethod
    async def list_payments_by_enrollment(db: AsyncSession, enrollment_id: UUID) -> List[Payment]:
        """Payment history of one enrollment, oldest first."""
        result = await db.execute(
            select(Payment)
            .where(Payment.enrollment_id == enrollment_id)
            .order_by(Payment.payment_date, Payment.created_at)
        )
        return list(result.unique().scalars().all())

    @staticmethod
    async def list_payments(db: AsyncSession, scope: ScopeFilter) -> List[Payment]:
        """All payments visible under ``scope``, newest first."""
        stmt = scope.apply(select(Payment), Payment.branch_id)
        result = await db.execute(stmt.order_by(Payment.payment_date.desc()))
        return list(result.unique().scalars().all())

    @staticmethod
    async def list_enrollments(db: AsyncSession, scope: ScopeFilter) -> List[Enrollment]:
        """Enrollments visible under ``scope`` with display relations, newest first."""
        stmt = scope.apply(select(Enrollment), Enrollment.branch_id).options(
            selectinload(Enrollment.student),
            selectinload(Enrollment.course),
            selectinload(Enrollment.branch),
        )
        result = await db.execute(
            stmt.order_by(Enrollment.enrollment_date.desc(), Enrollment.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def confirmed_totals_by_enrollment(
        db: AsyncSession,
        enrollment_ids: Iterable[UUID],
    ) -> Dict[UUID, Dict[str, object]]:
        """
        Sum and count of CONFIRMADO payments per enrollment.

        Returns:
            {enrollment_id: {"total": Decimal, "count": int}} for enrollments
            that have at least one confirmed payment
        """
        ids = list(enrollment_ids)
        if not ids:
            return {}
        result = await db.execute(
            select(
                Payment.enrollment_id,
                func.sum(Payment.amount),
                func.count(Payment.id),
            )
            .where(
                Payment.enrollment_id.in_(ids),
                Payment.status == PaymentStatus.CONFIRMADO,
            )
            .group_by(Payment.enrollment_id)
        )
        return {
            enrollment_id: {"total": to_money(total), "count": count}
            for enrollment_id, total, count in result.all()
        }

    @staticmethod
    async def add_payment(db: AsyncSession, payment: Payment) -> Payment:
        """Stage a new payment row and flush so its id is assigned."""
        db.add(payment)
        await db.flush()
        return payment
