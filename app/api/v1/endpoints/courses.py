from typing import Any, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.services.access_scope import Actor
from app.services.course_service import CourseService
from app.schemas.course import CourseCreate, CourseResponse, CourseUpdate
from app.schemas.responses import SuccessResponse, PaginatedResponse, paginate

router = APIRouter()


@router.post("", response_model=SuccessResponse[CourseResponse], status_code=status.HTTP_201_CREATED)
async def create_course(
    course_in: CourseCreate,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    course = await CourseService.create_course(db, actor, course_in)
    return SuccessResponse(data=course, message="Course created")


@router.get("", response_model=PaginatedResponse[CourseResponse])
async def list_courses(
    branch_id: Optional[UUID] = None,
    active: Optional[bool] = None,
    name: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Courses of the caller's branch plus those offered at every branch.
    """
    courses = await CourseService.list_courses(db, actor, branch_id=branch_id, active=active, name=name)
    return PaginatedResponse(**paginate(courses, page, page_size))


@router.get("/{course_id}", response_model=SuccessResponse[CourseResponse])
async def get_course(
    course_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    course = await CourseService.get_course(db, actor, course_id)
    return SuccessResponse(data=course)


@router.put("/{course_id}", response_model=SuccessResponse[CourseResponse])
async def update_course(
    course_id: UUID,
    course_in: CourseUpdate,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Price changes apply to new enrollments only.
    """
    course = await CourseService.update_course(db, actor, course_id, course_in)
    return SuccessResponse(data=course, message="Course updated")


@router.patch("/{course_id}/toggle-status", response_model=SuccessResponse[CourseResponse])
async def toggle_course_status(
    course_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    course = await CourseService.toggle_course_status(db, actor, course_id)
    return SuccessResponse(data=course, message="Course status changed")


@router.delete("/{course_id}", response_model=SuccessResponse[None])
async def deactivate_course(
    course_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await CourseService.deactivate_course(db, actor, course_id)
    return SuccessResponse(data=None, message="Course deactivated")
