"""Students and Courses"""

from sqlalchemy import Column, String, Integer, Numeric
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, BranchScopedMixin, StatusMixin


class Student(BaseModel, BranchScopedMixin, StatusMixin):
    """
    Driving school student, registered at a branch.
    """
    __tablename__ = "students"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    document_number = Column(String(20), unique=True, nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(100), nullable=True)

    enrollments = relationship("Enrollment", back_populates="student")

    @property
    def full_name(self) -> str:
        """Get student's full name"""
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Student {self.document_number}>"


class Course(BaseModel, BranchScopedMixin, StatusMixin):
    """
    Course offered by the school. A NULL branch_id means the course is
    available at every branch. ``price`` is snapshotted into each enrollment.
    """
    __tablename__ = "courses"

    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=True)
    total_hours = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    enrollments = relationship("Enrollment", back_populates="course")

    def __repr__(self) -> str:
        return f"<Course {self.name} ({self.price})>"
