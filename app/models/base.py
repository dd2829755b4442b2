"""Base Models and Mixins shared by every ledger table"""

import uuid
from sqlalchemy import Column, DateTime, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import declared_attr

from app.database import Base
from app.utils.time import get_utc_now


class BaseModel(Base):
    """
    Base model class with common fields for all models.

    Provides:
    - UUID primary key
    - created_at timestamp
    - updated_at timestamp
    """
    __abstract__ = True

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime, default=get_utc_now, nullable=False)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)


class BranchScopedMixin:
    """
    Mixin for rows owned by a branch (sede).

    branch_id is nullable: rows created before a branch was assigned, and
    courses offered at every branch, carry NULL.
    """

    @declared_attr
    def branch_id(cls):
        return Column(
            Uuid(as_uuid=True),
            ForeignKey("branches.id", ondelete="RESTRICT"),
            nullable=True,
            index=True
        )


class StatusMixin:
    """
    Mixin for models with active/inactive status.
    Rows are deactivated, never deleted.
    """
    is_active = Column(Boolean, default=True, nullable=False, index=True)
