"""Branch (sede) Model - the multi-tenant anchor"""

from sqlalchemy import Column, String, Boolean

from app.models.base import BaseModel, StatusMixin


class Branch(BaseModel, StatusMixin):
    """
    Physical school location and the unit of data isolation.
    At most one active branch is flagged as the main one.
    """
    __tablename__ = "branches"

    code = Column(String(10), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    address = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(100), nullable=True)
    is_main = Column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Branch {self.code} - {self.name}>"
