"""
Authentication — trust the identity provider's signed JWT.

Credentials are verified by the external identity service, which issues an
HS256 token whose ``sub`` claim is the user id. We accept it from the
``access_token`` cookie or an ``Authorization: Bearer`` header and never
look at passwords ourselves.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.config import settings
from skillswap.database import get_db
from skillswap.errors import AccountBanned, Forbidden
from skillswap.models.user import User
from skillswap.repositories import SQLAlchemyUserRepository

COOKIE_KEY = "access_token"


# ═══════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════

def create_access_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    """Create a signed JWT with an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _token_from_request(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(COOKIE_KEY)


def decode_user_id(token: str) -> Optional[int]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return int(payload.get("sub", 0)) or None
    except (JWTError, ValueError, TypeError):
        return None


# ═══════════════════════════════════════════════════════════════
#  Dependencies
# ═══════════════════════════════════════════════════════════════

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """
    Decode the token and return the User.
    Returns None when no valid token is present (allows public endpoints).
    """
    token = _token_from_request(request)
    if not token:
        return None
    user_id = decode_user_id(token)
    if not user_id:
        return None
    return await SQLAlchemyUserRepository(db).get(user_id)


async def require_user(current_user: Optional[User] = Depends(get_current_user)) -> User:
    if not current_user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if current_user.is_banned:
        raise AccountBanned()
    return current_user


async def require_admin(current_user: User = Depends(require_user)) -> User:
    if not current_user.is_admin:
        raise Forbidden("Admin privileges required.")
    return current_user
