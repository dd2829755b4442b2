"""Access token handling.

Tokens are issued by the authentication service; this module only needs to
verify them. ``create_access_token`` exists for tooling (``scripts/issue_token.py``)
and tests, using the same secret and algorithm as the issuer.
"""

from datetime import timedelta
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from app.config import settings
from app.utils.time import get_utc_now

ACCESS_TOKEN_TYPE = "access"


def create_access_token(user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: ID of the user the token identifies (``sub`` claim)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "exp": get_utc_now() + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a JWT token.

    Args:
        token: JWT token to decode

    Returns:
        Decoded token payload or None if invalid or expired
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
