"""Unit tests for BranchService."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.models import Branch, PaymentMethod
from app.schemas.branch import BranchCreate, BranchUpdate
from app.services.branch_service import DEFAULT_BRANCHES, DEFAULT_PAYMENT_METHODS, BranchService


@pytest.mark.asyncio
async def test_seed_reference_data_on_empty_database(db_session):
    await BranchService.seed_reference_data(db_session)

    branches = await BranchService.list_active_branches(db_session)
    assert [b.code for b in branches] == ["DUI", "SOA", "SOC", "SOG"]
    assert branches[0].is_main is True

    methods = (await db_session.execute(select(PaymentMethod.name))).scalars().all()
    assert sorted(methods) == sorted(DEFAULT_PAYMENT_METHODS)


@pytest.mark.asyncio
async def test_seed_is_idempotent(db_session):
    await BranchService.seed_reference_data(db_session)
    await BranchService.seed_reference_data(db_session)

    count = await db_session.scalar(select(func.count(Branch.id)))
    assert count == len(DEFAULT_BRANCHES)


@pytest.mark.asyncio
async def test_create_branch(db_session, ledger):
    branch = await BranchService.create_branch(
        db_session, BranchCreate(code="pai", name="Paipa")
    )
    assert branch.code == "PAI"
    assert branch.is_active is True

    names = [b.name for b in await BranchService.list_active_branches(db_session)]
    assert names == ["Duitama - Principal", "Paipa", "Sogamoso"]


@pytest.mark.asyncio
async def test_duplicate_code_rejected(db_session, ledger):
    with pytest.raises(InvalidArgumentError):
        await BranchService.create_branch(db_session, BranchCreate(code="DUI", name="Otra"))


@pytest.mark.asyncio
async def test_second_main_branch_rejected(db_session, ledger):
    with pytest.raises(InvalidArgumentError):
        await BranchService.create_branch(
            db_session, BranchCreate(code="TUN", name="Tunja", is_main=True)
        )


@pytest.mark.asyncio
async def test_create_branch_rolls_back_on_commit_failure():
    db = AsyncMock()
    db.add = MagicMock()
    no_rows = MagicMock()
    no_rows.first.return_value = None
    db.execute.return_value = no_rows
    db.commit.side_effect = RuntimeError("connection lost")

    with pytest.raises(RuntimeError):
        await BranchService.create_branch(db, BranchCreate(code="TUN", name="Tunja"))
    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_branch_race_on_code_is_invalid_argument():
    db = AsyncMock()
    db.add = MagicMock()
    no_rows = MagicMock()
    no_rows.first.return_value = None
    db.execute.return_value = no_rows
    db.commit.side_effect = IntegrityError("INSERT INTO branches", {}, Exception("UNIQUE constraint failed"))

    with pytest.raises(InvalidArgumentError) as exc_info:
        await BranchService.create_branch(db, BranchCreate(code="tun", name="Tunja"))
    assert exc_info.value.details == {"code": "TUN"}
    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_lookups(db_session, ledger):
    assert (await BranchService.get_branch(db_session, ledger["sog"].id)).code == "SOG"
    assert (await BranchService.get_by_code(db_session, "sog")).id == ledger["sog"].id
    assert (await BranchService.get_main_branch(db_session)).id == ledger["dui"].id

    with pytest.raises(NotFoundError):
        await BranchService.get_branch(db_session, uuid.uuid4())
    with pytest.raises(NotFoundError):
        await BranchService.get_by_code(db_session, "XXX")


@pytest.mark.asyncio
async def test_update_branch_fields(db_session, ledger):
    updated = await BranchService.update_branch(
        db_session, ledger["sog"].id, BranchUpdate(name="Sogamoso Centro", code="sgm", phone="3000000000")
    )
    assert updated.name == "Sogamoso Centro"
    assert updated.code == "SGM"
    assert updated.phone == "3000000000"
    assert updated.is_main is False

    with pytest.raises(InvalidArgumentError):
        await BranchService.update_branch(db_session, ledger["sog"].id, BranchUpdate(code="DUI"))


@pytest.mark.asyncio
async def test_update_enforces_single_active_main(db_session, ledger):
    with pytest.raises(InvalidArgumentError):
        await BranchService.update_branch(db_session, ledger["sog"].id, BranchUpdate(is_main=True))

    # the current main branch may be edited freely
    await BranchService.update_branch(db_session, ledger["dui"].id, BranchUpdate(is_main=True, name="Duitama"))

    # once the old main branch is retired another one can take over
    await BranchService.update_branch(db_session, ledger["dui"].id, BranchUpdate(is_main=False))
    promoted = await BranchService.update_branch(db_session, ledger["sog"].id, BranchUpdate(is_main=True))
    assert promoted.is_main is True
    assert (await BranchService.get_main_branch(db_session)).id == ledger["sog"].id


@pytest.mark.asyncio
async def test_reactivating_a_second_main_is_rejected(db_session, ledger):
    await BranchService.deactivate_branch(db_session, ledger["dui"].id)
    await BranchService.update_branch(db_session, ledger["sog"].id, BranchUpdate(is_main=True))

    with pytest.raises(InvalidArgumentError):
        await BranchService.update_branch(db_session, ledger["dui"].id, BranchUpdate(is_active=True))


@pytest.mark.asyncio
async def test_deactivate_keeps_the_row(db_session, ledger):
    branch = await BranchService.deactivate_branch(db_session, ledger["sog"].id)
    assert branch.is_active is False

    assert [b.code for b in await BranchService.list_active_branches(db_session)] == ["DUI"]
    assert (await BranchService.get_branch(db_session, ledger["sog"].id)).is_active is False

    with pytest.raises(NotFoundError):
        await BranchService.deactivate_branch(db_session, uuid.uuid4())
