"""Shared pytest fixtures: a throwaway SQLite ledger, seeded branches and callers."""

import os
from datetime import date
from decimal import Decimal

# Settings are read at import time; point them at SQLite before any app import.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import app.models  # noqa: F401  register every mapped table
from app.config import settings
from app.core.security import create_access_token
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models import Branch, Course, Enrollment, PaymentMethod, Student, User
from app.models.enums import EnrollmentStatus, UserRole
from app.services.access_scope import Actor


@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite so API requests and the test session use separate connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def ledger(db_session: AsyncSession) -> dict:
    """
    Two branches (DUI main, SOG), one course priced 500000, one student per
    branch, an active and an inactive payment method, and a user per role.
    """
    dui = Branch(code="DUI", name="Duitama - Principal", is_main=True, is_active=True)
    sog = Branch(code="SOG", name="Sogamoso", is_main=False, is_active=True)
    db_session.add_all([dui, sog])
    await db_session.flush()

    cash = PaymentMethod(name="Efectivo", is_active=True)
    cheque = PaymentMethod(name="Cheque", is_active=False)
    course = Course(name="Licencia B1", total_hours=40, price=Decimal("500000.00"), is_active=True)
    ana = Student(
        first_name="Ana", last_name="Rojas", document_number="1001",
        email="ana@example.com", branch_id=dui.id, is_active=True,
    )
    luis = Student(
        first_name="Luis", last_name="Pérez", document_number="1002",
        branch_id=sog.id, is_active=True,
    )
    users = {
        "super_admin": User(username="root", role=UserRole.SUPER_ADMIN, is_active=True),
        "admin_dui": User(username="admin.dui", role=UserRole.ADMIN, branch_id=dui.id, is_active=True),
        "admin_sog": User(username="admin.sog", role=UserRole.ADMIN, branch_id=sog.id, is_active=True),
        "admin_none": User(username="admin.none", role=UserRole.ADMIN, is_active=True),
        "student": User(username="ana", role=UserRole.STUDENT, branch_id=dui.id, is_active=True),
    }
    db_session.add_all([cash, cheque, course, ana, luis, *users.values()])
    await db_session.commit()

    return {
        "dui": dui,
        "sog": sog,
        "cash": cash,
        "cheque": cheque,
        "course": course,
        "ana": ana,
        "luis": luis,
        "users": users,
        "actors": {key: Actor.from_user(user) for key, user in users.items()},
    }


@pytest.fixture
def make_enrollment(db_session: AsyncSession, ledger: dict):
    """Factory for enrollments with explicit amounts, bypassing the payment flow."""

    async def _make(
        student=None,
        branch=None,
        total="500000.00",
        paid="0.00",
        enrollment_date=None,
        course=None,
        active=True,
        status=EnrollmentStatus.ACTIVE,
    ) -> Enrollment:
        student = student or ledger["ana"]
        course = course or ledger["course"]
        enrollment = Enrollment(
            student_id=student.id,
            course_id=course.id,
            branch_id=branch.id if branch is not None else None,
            enrollment_date=enrollment_date or date.today(),
            status=status,
            total_amount=Decimal(total),
            paid_amount=Decimal(paid),
            is_active=active,
        )
        db_session.add(enrollment)
        await db_session.commit()
        return enrollment

    return _make


@pytest.fixture
def api_base() -> str:
    """Base URL for API requests."""
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
async def async_client(session_factory, api_base: str):
    """Async HTTP client bound to the app, with get_db routed to the test database."""

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = _get_test_db
    transport = ASGITransport(app=fastapi_app)
    client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(ledger: dict):
    """Bearer headers for one of the seeded users: ``auth_headers("admin_dui")``."""

    def _headers(user_key: str) -> dict:
        token = create_access_token(ledger["users"][user_key].id)
        return {"Authorization": f"Bearer {token}"}

    return _headers
