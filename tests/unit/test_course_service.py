"""Unit tests for CourseService against a throwaway SQLite ledger."""

import uuid
from decimal import Decimal

import pytest

from app.core.exceptions import ForbiddenError, InvalidArgumentError, NotFoundError
from app.schemas.course import CourseCreate, CourseUpdate
from app.services.course_service import CourseService
from app.services.enrollment_service import EnrollmentService


@pytest.mark.asyncio
async def test_admin_course_belongs_to_own_branch(db_session, ledger):
    created = await CourseService.create_course(
        db_session, ledger["actors"]["admin_sog"],
        CourseCreate(name="Moto A2", price=Decimal("350000"), total_hours=20, branch_id=ledger["dui"].id),
    )
    assert created.branch_id == ledger["sog"].id
    assert created.branch_name == "Sogamoso"
    assert created.price == Decimal("350000.00")
    assert created.active is True


@pytest.mark.asyncio
async def test_super_admin_creates_shared_course(db_session, ledger):
    created = await CourseService.create_course(
        db_session, ledger["actors"]["super_admin"], CourseCreate(name="Recategorización C1", total_hours=10)
    )
    assert created.branch_id is None
    assert created.price == Decimal("0.00")

    with pytest.raises(NotFoundError):
        await CourseService.create_course(
            db_session, ledger["actors"]["super_admin"],
            CourseCreate(name="Otro", total_hours=10, branch_id=uuid.uuid4()),
        )


@pytest.mark.asyncio
async def test_duplicate_name_is_case_insensitive(db_session, ledger):
    with pytest.raises(InvalidArgumentError):
        await CourseService.create_course(
            db_session, ledger["actors"]["super_admin"], CourseCreate(name="licencia b1", total_hours=40)
        )


@pytest.mark.asyncio
async def test_admin_without_branch_cannot_create(db_session, ledger):
    with pytest.raises(ForbiddenError):
        await CourseService.create_course(
            db_session, ledger["actors"]["admin_none"], CourseCreate(name="Moto A2", total_hours=20)
        )


@pytest.mark.asyncio
async def test_list_includes_shared_courses(db_session, ledger):
    await CourseService.create_course(
        db_session, ledger["actors"]["admin_sog"], CourseCreate(name="Moto A2", total_hours=20)
    )
    await CourseService.create_course(
        db_session, ledger["actors"]["admin_dui"], CourseCreate(name="Camión C2", total_hours=60)
    )

    sog = await CourseService.list_courses(db_session, ledger["actors"]["admin_sog"])
    assert [c.name for c in sog] == ["Licencia B1", "Moto A2"]

    everything = await CourseService.list_courses(db_session, ledger["actors"]["super_admin"])
    assert len(everything) == 3

    narrowed = await CourseService.list_courses(
        db_session, ledger["actors"]["super_admin"], branch_id=ledger["dui"].id
    )
    assert [c.name for c in narrowed] == ["Camión C2", "Licencia B1"]

    by_name = await CourseService.list_courses(db_session, ledger["actors"]["super_admin"], name="moto")
    assert [c.branch_name for c in by_name] == ["Sogamoso"]

    assert await CourseService.list_courses(db_session, ledger["actors"]["admin_none"]) == []


@pytest.mark.asyncio
async def test_other_branch_course_is_hidden(db_session, ledger):
    moto = await CourseService.create_course(
        db_session, ledger["actors"]["admin_sog"], CourseCreate(name="Moto A2", total_hours=20)
    )
    with pytest.raises(ForbiddenError):
        await CourseService.get_course(db_session, ledger["actors"]["admin_dui"], moto.id)

    shared = await CourseService.get_course(db_session, ledger["actors"]["admin_dui"], ledger["course"].id)
    assert shared.name == "Licencia B1"


@pytest.mark.asyncio
async def test_price_change_does_not_touch_enrollments(db_session, ledger):
    root = ledger["actors"]["super_admin"]
    enrollment = await EnrollmentService.create_enrollment(
        db_session, root, ledger["ana"].id, ledger["course"].id
    )
    updated = await CourseService.update_course(
        db_session, root, ledger["course"].id, CourseUpdate(price=Decimal("650000"), description="Carro")
    )
    assert updated.price == Decimal("650000.00")
    assert updated.description == "Carro"
    assert updated.name == "Licencia B1"

    fetched = await EnrollmentService.get_enrollment(db_session, root, enrollment.id)
    assert fetched.total_amount == Decimal("500000.00")


@pytest.mark.asyncio
async def test_update_rejects_taken_name(db_session, ledger):
    root = ledger["actors"]["super_admin"]
    moto = await CourseService.create_course(db_session, root, CourseCreate(name="Moto A2", total_hours=20))
    with pytest.raises(InvalidArgumentError):
        await CourseService.update_course(db_session, root, moto.id, CourseUpdate(name="LICENCIA B1"))

    renamed = await CourseService.update_course(db_session, root, moto.id, CourseUpdate(name="moto a2"))
    assert renamed.name == "moto a2"


@pytest.mark.asyncio
async def test_admin_cannot_change_shared_course(db_session, ledger):
    admin = ledger["actors"]["admin_dui"]
    with pytest.raises(ForbiddenError):
        await CourseService.update_course(db_session, admin, ledger["course"].id, CourseUpdate(total_hours=45))
    with pytest.raises(ForbiddenError):
        await CourseService.deactivate_course(db_session, admin, ledger["course"].id)
    assert ledger["course"].is_active is True


@pytest.mark.asyncio
async def test_deactivate_and_toggle(db_session, ledger):
    admin = ledger["actors"]["admin_sog"]
    moto = await CourseService.create_course(db_session, admin, CourseCreate(name="Moto A2", total_hours=20))

    await CourseService.deactivate_course(db_session, admin, moto.id)
    inactive = await CourseService.list_courses(db_session, admin, active=False)
    assert [c.id for c in inactive] == [moto.id]

    toggled = await CourseService.toggle_course_status(db_session, admin, moto.id)
    assert toggled.active is True

    with pytest.raises(NotFoundError):
        await CourseService.toggle_course_status(db_session, admin, uuid.uuid4())
