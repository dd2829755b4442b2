from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID


class StudentCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    document_number: str = Field(..., min_length=1, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    active: bool = True
    # Honoured for SUPER_ADMIN only; admins register students at their own branch
    branch_id: Optional[UUID] = None


class StudentUpdate(BaseModel):
    """Partial update: only the fields sent are changed."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    document_number: Optional[str] = Field(None, min_length=1, max_length=20)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    active: Optional[bool] = None
    branch_id: Optional[UUID] = None


class StudentResponse(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    full_name: str
    document_number: str
    phone: Optional[str] = None
    email: Optional[str] = None
    active: bool
    branch_id: Optional[UUID] = None
    branch_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_student(cls, student, branch_name: Optional[str] = None) -> "StudentResponse":
        return cls(
            id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            full_name=student.full_name,
            document_number=student.document_number,
            phone=student.phone,
            email=student.email,
            active=student.is_active,
            branch_id=student.branch_id,
            branch_name=branch_name,
        )


class StudentPublic(BaseModel):
    """What the unauthenticated lookup by document reveals"""
    id: UUID
    full_name: str
    document_number: str
    branch_id: Optional[UUID] = None
    branch_name: Optional[str] = None
