"""Branch Service - branch catalogue and reference data"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.models.branch import Branch
from app.models.payment import PaymentMethod
from app.schemas.branch import BranchCreate, BranchUpdate

logger = logging.getLogger(__name__)

DEFAULT_BRANCHES = (
    {
        "code": "DUI",
        "name": "Duitama - Principal",
        "address": "Calle 12 # 5-45, Duitama",
        "phone": "3114567890",
        "email": "duitama@escuela.com",
        "is_main": True,
    },
    {
        "code": "SOG",
        "name": "Sogamoso",
        "address": "Carrera 8 # 10-23, Sogamoso",
        "phone": "3114567891",
        "email": "sogamoso@escuela.com",
        "is_main": False,
    },
    {
        "code": "SOA",
        "name": "Soatá",
        "address": "Calle 7 # 3-12, Soatá",
        "phone": "3114567892",
        "email": "soata@escuela.com",
        "is_main": False,
    },
    {
        "code": "SOC",
        "name": "Socha",
        "address": "Avenida Central # 15-67, Socha",
        "phone": "3114567893",
        "email": "socha@escuela.com",
        "is_main": False,
    },
)

DEFAULT_PAYMENT_METHODS = ("Efectivo", "Transferencia", "Tarjeta")


class BranchService:
    """Service layer for Branch operations"""

    @staticmethod
    async def _code_taken(db: AsyncSession, code: str, exclude_id: Optional[UUID] = None) -> bool:
        stmt = select(Branch.id).where(Branch.code == code)
        if exclude_id is not None:
            stmt = stmt.where(Branch.id != exclude_id)
        return (await db.execute(stmt)).first() is not None

    @staticmethod
    async def _other_active_main(db: AsyncSession, exclude_id: Optional[UUID] = None) -> bool:
        stmt = select(Branch.id).where(
            Branch.is_main == True,  # noqa: E712
            Branch.is_active == True,  # noqa: E712
        )
        if exclude_id is not None:
            stmt = stmt.where(Branch.id != exclude_id)
        return (await db.execute(stmt)).first() is not None

    @staticmethod
    async def _commit(db: AsyncSession, code: str) -> None:
        try:
            await db.commit()
        except IntegrityError:
            # a concurrent writer took the code between the check and the insert
            await db.rollback()
            raise InvalidArgumentError("Branch code already exists", {"code": code})
        except Exception:
            await db.rollback()
            raise

    @staticmethod
    async def list_active_branches(db: AsyncSession) -> List[Branch]:
        """Active branches, main branch first, then by name."""
        result = await db.execute(
            select(Branch)
            .where(Branch.is_active == True)  # noqa: E712
            .order_by(Branch.is_main.desc(), Branch.name)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_branch(db: AsyncSession, branch_id: UUID) -> Branch:
        """
        Raises:
            NotFoundError: no branch with this id
        """
        branch = await db.get(Branch, branch_id)
        if not branch:
            raise NotFoundError("Branch", branch_id)
        return branch

    @staticmethod
    async def get_by_code(db: AsyncSession, code: str) -> Branch:
        code = code.strip().upper()
        result = await db.execute(select(Branch).where(Branch.code == code))
        branch = result.scalar_one_or_none()
        if not branch:
            raise NotFoundError("Branch", code)
        return branch

    @staticmethod
    async def get_main_branch(db: AsyncSession) -> Branch:
        result = await db.execute(
            select(Branch).where(
                Branch.is_main == True,  # noqa: E712
                Branch.is_active == True,  # noqa: E712
            )
        )
        branch = result.scalars().first()
        if not branch:
            raise NotFoundError("Main branch")
        return branch

    @staticmethod
    async def create_branch(db: AsyncSession, data: BranchCreate) -> Branch:
        """
        Raises:
            InvalidArgumentError: code already used, or a second active main branch
        """
        code = data.code.strip().upper()
        if await BranchService._code_taken(db, code):
            raise InvalidArgumentError("Branch code already exists", {"code": code})

        if data.is_main and await BranchService._other_active_main(db):
            raise InvalidArgumentError("An active main branch already exists")

        branch = Branch(
            code=code,
            name=data.name,
            address=data.address,
            phone=data.phone,
            email=data.email,
            is_main=data.is_main,
            is_active=True,
        )
        db.add(branch)
        await BranchService._commit(db, code)

        logger.info("Branch created", extra={"branch_id": str(branch.id), "code": code})
        return branch

    @staticmethod
    async def update_branch(db: AsyncSession, branch_id: UUID, data: BranchUpdate) -> Branch:
        """
        Change the fields sent.

        Raises:
            NotFoundError: branch does not exist
            InvalidArgumentError: code used by another branch, or the change
                would leave two active main branches
        """
        branch = await BranchService.get_branch(db, branch_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "code" in changes:
            changes["code"] = changes["code"].strip().upper()
            code = changes["code"]
            if code != branch.code and await BranchService._code_taken(db, code, exclude_id=branch.id):
                raise InvalidArgumentError("Branch code already exists", {"code": code})

        will_be_main = changes.get("is_main", branch.is_main)
        will_be_active = changes.get("is_active", branch.is_active)
        if will_be_main and will_be_active and not (branch.is_main and branch.is_active):
            if await BranchService._other_active_main(db, exclude_id=branch.id):
                raise InvalidArgumentError("An active main branch already exists")

        for field, value in changes.items():
            setattr(branch, field, value)
        await BranchService._commit(db, branch.code)

        logger.info(
            "Branch updated",
            extra={"branch_id": str(branch.id), "fields": sorted(data.model_fields_set)},
        )
        return branch

    @staticmethod
    async def deactivate_branch(db: AsyncSession, branch_id: UUID) -> Branch:
        """Mark a branch inactive. Branches own ledger rows and are never deleted."""
        branch = await BranchService.get_branch(db, branch_id)
        try:
            branch.is_active = False
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Branch deactivated", extra={"branch_id": str(branch.id), "code": branch.code})
        return branch

    @staticmethod
    async def seed_reference_data(db: AsyncSession) -> None:
        """Insert default branches and payment methods into an empty database."""
        has_branches = (await db.execute(select(Branch.id).limit(1))).first()
        if not has_branches:
            db.add_all(Branch(is_active=True, **values) for values in DEFAULT_BRANCHES)
            logger.info("Seeded default branches", extra={"count": len(DEFAULT_BRANCHES)})
        else:
            logger.info("Branches already exist, skipping seed")

        has_methods = (await db.execute(select(PaymentMethod.id).limit(1))).first()
        if not has_methods:
            db.add_all(PaymentMethod(name=name, is_active=True) for name in DEFAULT_PAYMENT_METHODS)
            logger.info("Seeded default payment methods", extra={"count": len(DEFAULT_PAYMENT_METHODS)})

        await db.commit()
