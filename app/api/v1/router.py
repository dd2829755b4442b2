"""API V1 Router"""

from fastapi import APIRouter

# Import endpoint routers
from app.api.v1.endpoints import (
    payments, enrollments, admin, branches, references, students, courses
)

# Create API v1 router
api_router = APIRouter()

# Include endpoint routers with prefixes and tags
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(enrollments.router, prefix="/enrollments", tags=["Enrollments"])
api_router.include_router(students.router, prefix="/students", tags=["Students"])
api_router.include_router(courses.router, prefix="/courses", tags=["Courses"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin Finance"])
api_router.include_router(branches.router, prefix="/branches", tags=["Branches"])
api_router.include_router(references.router, prefix="/references", tags=["References"])
