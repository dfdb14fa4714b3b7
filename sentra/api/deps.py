import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from sentra.core.security import decode_access_token
from sentra.crud.user import get_user
from sentra.db.session import get_db
from sentra.models import User, UserRole
from sentra.schemas import TokenPayload

logger = logging.getLogger("sentra.auth")

bearer_scheme = HTTPBearer(auto_error=False)


async def _user_from_token(db: AsyncSession, token: str) -> Optional[User]:
    try:
        payload = TokenPayload(**decode_access_token(token))
    except (JWTError, ValidationError):
        return None
    if payload.sub is None:
        return None
    user = await get_user(db, id=payload.sub)
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, no token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = await _user_from_token(db, credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_current_admin_user(
    current_user: User = Depends(get_current_user),
) -> User:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized as an admin",
        )
    return current_user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """The caller when a valid bearer token is sent, otherwise ``None``."""
    if credentials is None:
        return None
    user = await _user_from_token(db, credentials.credentials)
    if user is None:
        logger.warning("Token verification failed, proceeding as anonymous")
    return user
