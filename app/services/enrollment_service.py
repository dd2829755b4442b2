"""Enrollment Service - opens, lists and closes enrollments"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, NotFoundError
from app.models.enrollment import Enrollment
from app.models.enums import EnrollmentStatus, UserRole
from app.schemas.enrollment import EnrollmentResponse, EnrollmentSummary
from app.services.access_scope import Actor, ensure_visible, resolve_scope
from app.services.ledger_store import LedgerStore
from app.utils.money import ZERO, to_money
from app.utils.time import get_local_today

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service layer for Enrollment operations"""

    @staticmethod
    async def _resolve_branch(
        db: AsyncSession,
        actor: Actor,
        student,
        requested_branch_id: Optional[UUID],
    ) -> Optional[UUID]:
        if actor.role == UserRole.SUPER_ADMIN:
            if requested_branch_id is None:
                return student.branch_id
            branch = await LedgerStore.get_branch(db, requested_branch_id)
            if not branch:
                raise NotFoundError("Branch", requested_branch_id)
            return branch.id

        if actor.branch_id is None:
            raise ForbiddenError("Administrator has no branch assigned")
        return actor.branch_id

    @staticmethod
    async def create_enrollment(
        db: AsyncSession,
        actor: Actor,
        student_id: UUID,
        course_id: UUID,
        branch_id: Optional[UUID] = None,
    ) -> EnrollmentResponse:
        """
        Enroll a student in a course at the course's current price.

        Raises:
            NotFoundError: student, course or requested branch does not exist
            ForbiddenError: caller may not create enrollments
        """
        resolve_scope(actor)

        student = await LedgerStore.get_student(db, student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        course = await LedgerStore.get_course(db, course_id)
        if not course:
            raise NotFoundError("Course", course_id)

        enrollment_branch_id = await EnrollmentService._resolve_branch(
            db, actor, student, branch_id
        )

        try:
            enrollment = Enrollment(
                student_id=student.id,
                course_id=course.id,
                branch_id=enrollment_branch_id,
                enrollment_date=get_local_today(),
                status=EnrollmentStatus.ACTIVE,
                total_amount=to_money(course.price),
                paid_amount=ZERO,
                is_active=True,
            )
            db.add(enrollment)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Enrollment created",
            extra={
                "enrollment_id": str(enrollment.id),
                "student_id": str(student.id),
                "course_id": str(course.id),
                "branch_id": str(enrollment_branch_id) if enrollment_branch_id else None,
                "total_amount": str(enrollment.total_amount),
            },
        )
        created = await LedgerStore.get_enrollment(db, enrollment.id, with_details=True)
        return EnrollmentResponse.from_enrollment(created)

    @staticmethod
    async def get_enrollment(db: AsyncSession, actor: Actor, enrollment_id: UUID) -> EnrollmentResponse:
        scope = resolve_scope(actor)
        enrollment = await LedgerStore.get_enrollment(db, enrollment_id, with_details=True)
        if not enrollment:
            raise NotFoundError("Enrollment", enrollment_id)
        ensure_visible(scope, enrollment.branch_id, "Enrollment")
        return EnrollmentResponse.from_enrollment(enrollment)

    @staticmethod
    async def enrollment_summary(db: AsyncSession, actor: Actor, enrollment_id: UUID) -> EnrollmentSummary:
        """Balance snapshot with PAGADO / EN_PROGRESO / PENDIENTE state."""
        scope = resolve_scope(actor)
        enrollment = await LedgerStore.get_enrollment(db, enrollment_id)
        if not enrollment:
            raise NotFoundError("Enrollment", enrollment_id)
        ensure_visible(scope, enrollment.branch_id, "Enrollment")

        total = to_money(enrollment.total_amount)
        paid = to_money(enrollment.paid_amount)
        return EnrollmentSummary(
            enrollment_id=enrollment.id,
            total_amount=total,
            paid_amount=paid,
            pending_amount=total - paid,
            status=enrollment.payment_state,
        )

    @staticmethod
    async def list_enrollments(
        db: AsyncSession,
        actor: Actor,
        branch_id: Optional[UUID] = None,
    ) -> List[EnrollmentResponse]:
        scope = resolve_scope(actor, branch_id)
        if scope.is_empty:
            return []
        enrollments = await LedgerStore.list_enrollments(db, scope)
        return [EnrollmentResponse.from_enrollment(e) for e in enrollments]

    @staticmethod
    async def deactivate_enrollment(db: AsyncSession, actor: Actor, enrollment_id: UUID) -> None:
        """
        Close an enrollment. It stays in the ledger but takes no more payments.

        Raises:
            NotFoundError: enrollment does not exist
            ForbiddenError: enrollment outside the caller's scope
        """
        scope = resolve_scope(actor)
        enrollment = await LedgerStore.get_enrollment(db, enrollment_id, for_update=True)
        if not enrollment:
            raise NotFoundError("Enrollment", enrollment_id)
        ensure_visible(scope, enrollment.branch_id, "Enrollment")

        try:
            enrollment.is_active = False
            enrollment.status = EnrollmentStatus.CANCELLED
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Enrollment deactivated", extra={"enrollment_id": str(enrollment_id)})
