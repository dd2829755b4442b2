from typing import Any, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.services.access_scope import Actor
from app.services.enrollment_service import EnrollmentService
from app.schemas.enrollment import EnrollmentCreate, EnrollmentResponse, EnrollmentSummary
from app.schemas.responses import SuccessResponse, PaginatedResponse, paginate

router = APIRouter()


@router.post("", response_model=SuccessResponse[EnrollmentResponse], status_code=status.HTTP_201_CREATED)
async def create_enrollment(
    enrollment_in: EnrollmentCreate,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Enroll a student; the course price becomes the enrollment total.
    """
    enrollment = await EnrollmentService.create_enrollment(
        db,
        actor,
        student_id=enrollment_in.student_id,
        course_id=enrollment_in.course_id,
        branch_id=enrollment_in.branch_id,
    )
    return SuccessResponse(data=enrollment, message="Enrollment created")


@router.get("", response_model=PaginatedResponse[EnrollmentResponse])
async def list_enrollments(
    branch_id: Optional[UUID] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    enrollments = await EnrollmentService.list_enrollments(db, actor, branch_id=branch_id)
    return PaginatedResponse(**paginate(enrollments, page, page_size))


@router.get("/{enrollment_id}", response_model=SuccessResponse[EnrollmentResponse])
async def get_enrollment(
    enrollment_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    enrollment = await EnrollmentService.get_enrollment(db, actor, enrollment_id)
    return SuccessResponse(data=enrollment)


@router.get("/{enrollment_id}/summary", response_model=SuccessResponse[EnrollmentSummary])
async def get_enrollment_summary(
    enrollment_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Total, paid and pending amounts with the payment state.
    """
    summary = await EnrollmentService.enrollment_summary(db, actor, enrollment_id)
    return SuccessResponse(data=summary)


@router.delete("/{enrollment_id}", response_model=SuccessResponse[None])
async def deactivate_enrollment(
    enrollment_id: UUID,
    actor: Actor = Depends(deps.get_current_actor),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await EnrollmentService.deactivate_enrollment(db, actor, enrollment_id)
    return SuccessResponse(data=None, message="Enrollment deactivated")
