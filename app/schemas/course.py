from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from decimal import Decimal


class CourseCreate(BaseModel):
    """
    New course. ``branch_id`` is honoured for SUPER_ADMIN only and may be left
    empty to offer the course at every branch.
    """
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    price: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    total_hours: int = Field(..., gt=0)
    branch_id: Optional[UUID] = None


class CourseUpdate(BaseModel):
    """Partial update: only the fields sent are changed. Existing enrollments keep their price."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    total_hours: Optional[int] = Field(None, gt=0)
    active: Optional[bool] = None


class CourseResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    total_hours: int
    active: bool
    branch_id: Optional[UUID] = None
    branch_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_course(cls, course, branch_name: Optional[str] = None) -> "CourseResponse":
        return cls(
            id=course.id,
            name=course.name,
            description=course.description,
            price=course.price,
            total_hours=course.total_hours,
            active=course.is_active,
            branch_id=course.branch_id,
            branch_name=branch_name,
        )
