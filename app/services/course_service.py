"""Course Service - course catalogue

A course either belongs to one branch or, with no branch, is offered at
every branch. Shared courses are visible to every administrator but only a
SUPER_ADMIN may change them.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from app.models.academic import Course
from app.models.branch import Branch
from app.models.enums import UserRole
from app.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from app.services.access_scope import Actor, ensure_visible, resolve_scope
from app.services.ledger_store import LedgerStore
from app.utils.money import to_money

logger = logging.getLogger(__name__)


class CourseService:
    """Service layer for Course operations"""

    @staticmethod
    async def _name_taken(db: AsyncSession, name: str, exclude_id: Optional[UUID] = None) -> bool:
        stmt = select(Course.id).where(func.lower(Course.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Course.id != exclude_id)
        return (await db.execute(stmt)).first() is not None

    @staticmethod
    async def _visible_course(db: AsyncSession, actor: Actor, course_id: UUID) -> Course:
        scope = resolve_scope(actor)
        course = await LedgerStore.get_course(db, course_id)
        if not course:
            raise NotFoundError("Course", course_id)
        ensure_visible(scope, course.branch_id, "Course", include_shared=True)
        return course

    @staticmethod
    async def _editable_course(db: AsyncSession, actor: Actor, course_id: UUID) -> Course:
        course = await CourseService._visible_course(db, actor, course_id)
        if course.branch_id is None and actor.role != UserRole.SUPER_ADMIN:
            raise ForbiddenError("Courses offered at every branch are managed by a super administrator")
        return course

    @staticmethod
    async def _response(db: AsyncSession, course: Course) -> CourseResponse:
        branch_name = None
        if course.branch_id is not None:
            branch = await LedgerStore.get_branch(db, course.branch_id)
            branch_name = branch.name if branch else None
        return CourseResponse.from_course(course, branch_name)

    @staticmethod
    async def create_course(db: AsyncSession, actor: Actor, data: CourseCreate) -> CourseResponse:
        """
        Add a course to the catalogue.

        SUPER_ADMIN may attach it to a branch or leave it shared; an admin's
        course always belongs to their own branch.

        Raises:
            InvalidArgumentError: another course has the same name (case-insensitive)
            NotFoundError: requested branch does not exist
            ForbiddenError: caller may not manage courses
        """
        resolve_scope(actor)

        if actor.role == UserRole.SUPER_ADMIN:
            branch_id = data.branch_id
            if branch_id is not None and not await LedgerStore.get_branch(db, branch_id):
                raise NotFoundError("Branch", branch_id)
        elif actor.branch_id is None:
            raise ForbiddenError("Administrator has no branch assigned")
        else:
            branch_id = actor.branch_id

        name = data.name.strip()
        if await CourseService._name_taken(db, name):
            raise InvalidArgumentError("A course with this name already exists", {"name": name})

        try:
            course = Course(
                name=name,
                description=data.description,
                price=to_money(data.price),
                total_hours=data.total_hours,
                branch_id=branch_id,
                is_active=True,
            )
            db.add(course)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Course created",
            extra={
                "course_id": str(course.id),
                "branch_id": str(branch_id) if branch_id else None,
                "price": str(course.price),
            },
        )
        return await CourseService._response(db, course)

    @staticmethod
    async def list_courses(
        db: AsyncSession,
        actor: Actor,
        branch_id: Optional[UUID] = None,
        active: Optional[bool] = None,
        name: Optional[str] = None,
    ) -> List[CourseResponse]:
        """Courses of the caller's branch plus shared ones, ordered by name."""
        scope = resolve_scope(actor, branch_id)
        if scope.is_empty:
            return []

        stmt = select(Course, Branch.name).outerjoin(Branch, Course.branch_id == Branch.id)
        stmt = scope.apply(stmt, Course.branch_id, include_shared=True)
        if active is not None:
            stmt = stmt.where(Course.is_active == active)
        if name:
            stmt = stmt.where(Course.name.ilike(f"%{name}%"))

        result = await db.execute(stmt.order_by(Course.name))
        return [CourseResponse.from_course(course, branch_name) for course, branch_name in result.all()]

    @staticmethod
    async def get_course(db: AsyncSession, actor: Actor, course_id: UUID) -> CourseResponse:
        course = await CourseService._visible_course(db, actor, course_id)
        return await CourseService._response(db, course)

    @staticmethod
    async def update_course(
        db: AsyncSession,
        actor: Actor,
        course_id: UUID,
        data: CourseUpdate,
    ) -> CourseResponse:
        """
        Change the fields sent. A new price applies to future enrollments only.

        Raises:
            NotFoundError: course does not exist
            ForbiddenError: course outside the caller's scope, or shared and caller is not SUPER_ADMIN
            InvalidArgumentError: another course has the new name
        """
        course = await CourseService._editable_course(db, actor, course_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes:
            name = changes.pop("name").strip()
            if await CourseService._name_taken(db, name, exclude_id=course.id):
                raise InvalidArgumentError("A course with this name already exists", {"name": name})
            course.name = name
        if "price" in changes:
            course.price = to_money(changes.pop("price"))
        if "active" in changes:
            course.is_active = changes.pop("active")
        for field, value in changes.items():
            setattr(course, field, value)

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Course updated", extra={"course_id": str(course.id)})
        return await CourseService._response(db, course)

    @staticmethod
    async def deactivate_course(db: AsyncSession, actor: Actor, course_id: UUID) -> None:
        """Withdraw a course from the catalogue; its enrollments are untouched."""
        course = await CourseService._editable_course(db, actor, course_id)
        try:
            course.is_active = False
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Course deactivated", extra={"course_id": str(course_id)})

    @staticmethod
    async def toggle_course_status(db: AsyncSession, actor: Actor, course_id: UUID) -> CourseResponse:
        course = await CourseService._editable_course(db, actor, course_id)
        try:
            course.is_active = not course.is_active
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Course status toggled",
            extra={"course_id": str(course.id), "active": course.is_active},
        )
        return await CourseService._response(db, course)
