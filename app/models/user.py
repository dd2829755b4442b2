"""Staff/Student identity Model"""

from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, BranchScopedMixin, StatusMixin
from app.models.enums import UserRole


class User(BaseModel, BranchScopedMixin, StatusMixin):
    """
    Authenticated caller. Credentials live with the auth service; this row
    only carries what ledger authorization needs: role and assigned branch.
    """
    __tablename__ = "users"

    username = Column(String(100), unique=True, nullable=False, index=True)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, index=True)

    branch = relationship("Branch", lazy="joined")

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role})>"
