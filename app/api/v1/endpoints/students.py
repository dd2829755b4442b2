from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.services.access_scope import Actor
from app.services.student_service import StudentService
from app.schemas.student import StudentCreate, StudentPublic, StudentResponse, StudentUpdate
from app.schemas.responses import SuccessResponse, PaginatedResponse, paginate

router = APIRouter()


@router.post("", response_model=SuccessResponse[StudentResponse], status_code=status.HTTP_201_CREATED)
async def create_student(
    student_in: StudentCreate,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Register a student at the caller's branch (SUPER_ADMIN may pick one).
    """
    student = await StudentService.create_student(db, actor, student_in)
    return SuccessResponse(data=student, message="Student registered")


@router.get("", response_model=PaginatedResponse[StudentResponse])
async def list_students(
    branch_id: Optional[UUID] = None,
    active: Optional[bool] = None,
    document: Optional[str] = Query(None, max_length=20),
    name: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    students = await StudentService.list_students(
        db, actor, branch_id=branch_id, active=active, document=document, name=name
    )
    return PaginatedResponse(**paginate(students, page, page_size))


@router.get("/public", response_model=SuccessResponse[List[StudentPublic]])
async def search_public_students(
    document: str = Query(..., min_length=3, max_length=20),
    branch_id: Optional[UUID] = None,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Unauthenticated lookup of active students by document number.
    """
    students = await StudentService.search_public(db, document, branch_id=branch_id)
    return SuccessResponse(data=students)


@router.get("/{student_id}", response_model=SuccessResponse[StudentResponse])
async def get_student(
    student_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    student = await StudentService.get_student(db, actor, student_id)
    return SuccessResponse(data=student)


@router.put("/{student_id}", response_model=SuccessResponse[StudentResponse])
async def update_student(
    student_id: UUID,
    student_in: StudentUpdate,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    student = await StudentService.update_student(db, actor, student_id, student_in)
    return SuccessResponse(data=student, message="Student updated")


@router.patch("/{student_id}/toggle-status", response_model=SuccessResponse[StudentResponse])
async def toggle_student_status(
    student_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    student = await StudentService.toggle_student_status(db, actor, student_id)
    return SuccessResponse(data=student, message="Student status changed")


@router.delete("/{student_id}", response_model=SuccessResponse[None])
async def delete_student(
    student_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Remove a student without enrollments; otherwise answers 409.
    """
    await StudentService.delete_student(db, actor, student_id)
    return SuccessResponse(data=None, message="Student deleted")
