"""Student Service - student registry, scoped by branch"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
)
from app.models.academic import Student
from app.models.branch import Branch
from app.models.enrollment import Enrollment
from app.models.enums import UserRole
from app.schemas.student import StudentCreate, StudentPublic, StudentResponse, StudentUpdate
from app.services.access_scope import Actor, ensure_visible, resolve_scope
from app.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

DUPLICATE_DOCUMENT = "A student with this document number already exists"


def _student_with_branch_name():
    return select(Student, Branch.name).outerjoin(Branch, Student.branch_id == Branch.id)


class StudentService:
    """Service layer for Student operations"""

    @staticmethod
    async def _resolve_branch(
        db: AsyncSession,
        actor: Actor,
        requested_branch_id: Optional[UUID],
    ) -> Optional[UUID]:
        if actor.role == UserRole.SUPER_ADMIN:
            if requested_branch_id is None:
                return None
            branch = await LedgerStore.get_branch(db, requested_branch_id)
            if not branch:
                raise NotFoundError("Branch", requested_branch_id)
            return branch.id

        if actor.branch_id is None:
            raise ForbiddenError("Administrator has no branch assigned")
        return actor.branch_id

    @staticmethod
    async def _document_taken(
        db: AsyncSession,
        document_number: str,
        exclude_id: Optional[UUID] = None,
    ) -> bool:
        stmt = select(Student.id).where(Student.document_number == document_number)
        if exclude_id is not None:
            stmt = stmt.where(Student.id != exclude_id)
        return (await db.execute(stmt)).first() is not None

    @staticmethod
    async def _commit(db: AsyncSession, document_number: str) -> None:
        try:
            await db.commit()
        except IntegrityError:
            # lost a race on the unique document number
            await db.rollback()
            raise InvalidArgumentError(DUPLICATE_DOCUMENT, {"document_number": document_number})
        except Exception:
            await db.rollback()
            raise

    @staticmethod
    async def _visible_student(db: AsyncSession, actor: Actor, student_id: UUID) -> Student:
        scope = resolve_scope(actor)
        student = await LedgerStore.get_student(db, student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        ensure_visible(scope, student.branch_id, "Student")
        return student

    @staticmethod
    async def _response(db: AsyncSession, student: Student) -> StudentResponse:
        branch_name = None
        if student.branch_id is not None:
            branch = await LedgerStore.get_branch(db, student.branch_id)
            branch_name = branch.name if branch else None
        return StudentResponse.from_student(student, branch_name)

    @staticmethod
    async def create_student(db: AsyncSession, actor: Actor, data: StudentCreate) -> StudentResponse:
        """
        Register a student. SUPER_ADMIN picks the branch (or none), an admin
        always registers at their own branch.

        Raises:
            InvalidArgumentError: document number already registered
            NotFoundError: requested branch does not exist
            ForbiddenError: caller may not register students
        """
        resolve_scope(actor)
        branch_id = await StudentService._resolve_branch(db, actor, data.branch_id)

        document_number = data.document_number.strip()
        if await StudentService._document_taken(db, document_number):
            raise InvalidArgumentError(DUPLICATE_DOCUMENT, {"document_number": document_number})

        student = Student(
            first_name=data.first_name,
            last_name=data.last_name,
            document_number=document_number,
            phone=data.phone,
            email=data.email,
            branch_id=branch_id,
            is_active=data.active,
        )
        db.add(student)
        await StudentService._commit(db, document_number)

        logger.info(
            "Student registered",
            extra={
                "student_id": str(student.id),
                "branch_id": str(branch_id) if branch_id else None,
            },
        )
        return await StudentService._response(db, student)

    @staticmethod
    async def list_students(
        db: AsyncSession,
        actor: Actor,
        branch_id: Optional[UUID] = None,
        active: Optional[bool] = None,
        document: Optional[str] = None,
        name: Optional[str] = None,
    ) -> List[StudentResponse]:
        """
        Students in the caller's scope ordered by last name, first name.

        ``document`` and ``name`` are case-insensitive substring filters; name
        matches either the first or the last name.
        """
        scope = resolve_scope(actor, branch_id)
        if scope.is_empty:
            return []

        stmt = scope.apply(_student_with_branch_name(), Student.branch_id)
        if active is not None:
            stmt = stmt.where(Student.is_active == active)
        if document:
            stmt = stmt.where(Student.document_number.ilike(f"%{document}%"))
        if name:
            pattern = f"%{name}%"
            stmt = stmt.where(or_(Student.first_name.ilike(pattern), Student.last_name.ilike(pattern)))

        result = await db.execute(stmt.order_by(Student.last_name, Student.first_name))
        return [StudentResponse.from_student(student, branch_name) for student, branch_name in result.all()]

    @staticmethod
    async def search_public(
        db: AsyncSession,
        document: str,
        branch_id: Optional[UUID] = None,
    ) -> List[StudentPublic]:
        """Active students whose document contains ``document``; no contact data."""
        stmt = _student_with_branch_name().where(
            Student.is_active == True,  # noqa: E712
            Student.document_number.ilike(f"%{document}%"),
        )
        if branch_id is not None:
            stmt = stmt.where(Student.branch_id == branch_id)

        result = await db.execute(stmt.order_by(Student.last_name, Student.first_name))
        return [
            StudentPublic(
                id=student.id,
                full_name=student.full_name,
                document_number=student.document_number,
                branch_id=student.branch_id,
                branch_name=branch_name,
            )
            for student, branch_name in result.all()
        ]

    @staticmethod
    async def get_student(db: AsyncSession, actor: Actor, student_id: UUID) -> StudentResponse:
        student = await StudentService._visible_student(db, actor, student_id)
        return await StudentService._response(db, student)

    @staticmethod
    async def update_student(
        db: AsyncSession,
        actor: Actor,
        student_id: UUID,
        data: StudentUpdate,
    ) -> StudentResponse:
        """
        Change the fields sent. Only SUPER_ADMIN may move a student to another
        branch; a branch sent by an admin is ignored.

        Raises:
            NotFoundError: student or requested branch does not exist
            ForbiddenError: student outside the caller's scope
            InvalidArgumentError: document number used by another student
        """
        student = await StudentService._visible_student(db, actor, student_id)
        changes = data.model_dump(exclude_unset=True)

        document_number = changes.pop("document_number", None)
        if document_number is not None:
            document_number = document_number.strip()
            if document_number != student.document_number and await StudentService._document_taken(
                db, document_number, exclude_id=student.id
            ):
                raise InvalidArgumentError(DUPLICATE_DOCUMENT, {"document_number": document_number})

        requested_branch_id = changes.pop("branch_id", None)
        if requested_branch_id is not None and actor.role == UserRole.SUPER_ADMIN:
            student.branch_id = await StudentService._resolve_branch(db, actor, requested_branch_id)
        if document_number is not None:
            student.document_number = document_number

        active = changes.pop("active", None)
        if active is not None:
            student.is_active = active
        for field, value in changes.items():
            # names are required; an explicit null leaves them as they are
            if field in ("first_name", "last_name") and value is None:
                continue
            setattr(student, field, value)

        await StudentService._commit(db, student.document_number)

        logger.info("Student updated", extra={"student_id": str(student.id)})
        return await StudentService._response(db, student)

    @staticmethod
    async def toggle_student_status(db: AsyncSession, actor: Actor, student_id: UUID) -> StudentResponse:
        student = await StudentService._visible_student(db, actor, student_id)
        try:
            student.is_active = not student.is_active
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Student status toggled",
            extra={"student_id": str(student.id), "active": student.is_active},
        )
        return await StudentService._response(db, student)

    @staticmethod
    async def delete_student(db: AsyncSession, actor: Actor, student_id: UUID) -> None:
        """
        Remove a student with no enrollments. Students with ledger history
        can only be deactivated.

        Raises:
            NotFoundError: student does not exist
            ForbiddenError: student outside the caller's scope
            InvalidStateError: student has enrollments
        """
        student = await StudentService._visible_student(db, actor, student_id)

        enrollment_count = await db.scalar(
            select(func.count(Enrollment.id)).where(Enrollment.student_id == student.id)
        )
        if enrollment_count:
            raise InvalidStateError(
                "Student has enrollments; deactivate instead",
                {"student_id": str(student.id), "enrollments": enrollment_count},
            )

        try:
            await db.delete(student)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Student deleted", extra={"student_id": str(student_id)})
