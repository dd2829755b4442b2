from typing import Any, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.models.user import User
from app.services.access_scope import Actor
from app.services.branch_service import BranchService
from app.schemas.branch import BranchCreate, BranchResponse, BranchUpdate
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("/public", response_model=SuccessResponse[List[BranchResponse]])
async def list_public_branches(
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Active branches for unauthenticated pages (login, student lookup).
    """
    branches = await BranchService.list_active_branches(db)
    return SuccessResponse(data=branches)


@router.get("", response_model=SuccessResponse[List[BranchResponse]])
async def list_branches(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Active branches, main branch first.
    """
    branches = await BranchService.list_active_branches(db)
    return SuccessResponse(data=branches)


@router.get("/main", response_model=SuccessResponse[BranchResponse])
async def get_main_branch(
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    branch = await BranchService.get_main_branch(db)
    return SuccessResponse(data=branch)


@router.get("/code/{code}", response_model=SuccessResponse[BranchResponse])
async def get_branch_by_code(
    code: str,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    branch = await BranchService.get_by_code(db, code)
    return SuccessResponse(data=branch)


@router.get("/{branch_id}", response_model=SuccessResponse[BranchResponse])
async def get_branch(
    branch_id: UUID,
    current_user: User = Depends(deps.get_current_user),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    branch = await BranchService.get_branch(db, branch_id)
    return SuccessResponse(data=branch)


@router.post("", response_model=SuccessResponse[BranchResponse], status_code=status.HTTP_201_CREATED)
async def create_branch(
    branch_in: BranchCreate,
    actor: Actor = Depends(deps.require_super_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    branch = await BranchService.create_branch(db, branch_in)
    return SuccessResponse(data=branch, message="Branch created")


@router.put("/{branch_id}", response_model=SuccessResponse[BranchResponse])
async def update_branch(
    branch_id: UUID,
    branch_in: BranchUpdate,
    actor: Actor = Depends(deps.require_super_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    branch = await BranchService.update_branch(db, branch_id, branch_in)
    return SuccessResponse(data=branch, message="Branch updated")


@router.delete("/{branch_id}", response_model=SuccessResponse[BranchResponse])
async def deactivate_branch(
    branch_id: UUID,
    actor: Actor = Depends(deps.require_super_admin),
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Deactivate a branch. Its ledger rows are kept.
    """
    branch = await BranchService.deactivate_branch(db, branch_id)
    return SuccessResponse(data=branch, message="Branch deactivated")
