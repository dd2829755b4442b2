"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, BranchScopedMixin, StatusMixin
from app.models.enums import *
from app.models.branch import Branch
from app.models.user import User
from app.models.academic import Student, Course
from app.models.enrollment import Enrollment
from app.models.payment import Payment, PaymentMethod


__all__ = [
    # Base classes
    "BaseModel",
    "BranchScopedMixin",
    "StatusMixin",

    # Tenancy & identity
    "Branch",
    "User",

    # Academic
    "Student",
    "Course",

    # Ledger
    "Enrollment",
    "Payment",
    "PaymentMethod",
]
