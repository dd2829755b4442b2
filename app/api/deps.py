"""API Dependencies"""

from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.database import get_db
from app.core.security import ACCESS_TOKEN_TYPE, decode_token
from app.models.user import User
from app.models.enums import UserRole
from app.services.access_scope import Actor

# Security scheme for bearer token
security = HTTPBearer()

__all__ = ["get_db", "get_current_user", "get_current_actor", "require_super_admin"]


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        HTTPException: 401 if the token is invalid or the user is unknown or inactive
    """
    payload = decode_token(credentials.credentials)
    if not payload:
        raise _credentials_error()

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise _credentials_error("Invalid token type")

    user_id_str: Optional[str] = payload.get("sub")
    if not user_id_str:
        raise _credentials_error()

    try:
        user_id = UUID(user_id_str)
    except ValueError:
        raise _credentials_error("Invalid user ID")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.unique().scalar_one_or_none()
    if not user or not user.is_active:
        raise _credentials_error("Inactive or unknown user")

    return user


async def get_current_actor(
    request: Request,
    current_user: User = Depends(get_current_user)
) -> Actor:
    """
    Role and branch of the caller, as the ledger services consume them.
    Also kept on ``request.state`` so request logs carry the caller.
    """
    actor = Actor.from_user(current_user)
    request.state.actor = actor
    return actor


async def require_super_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if actor.role != UserRole.SUPER_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return actor
