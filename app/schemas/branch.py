from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID


class BranchCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=10)
    name: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    is_main: bool = False


class BranchResponse(BaseModel):
    id: UUID
    code: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_main: bool
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class BranchUpdate(BaseModel):
    """Partial update: only the fields sent are changed."""
    code: Optional[str] = Field(None, min_length=1, max_length=10)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    is_main: Optional[bool] = None
    is_active: Optional[bool] = None
