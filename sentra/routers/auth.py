from typing import Any
import traceback
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sentra.api.deps import get_current_user
from sentra.core.security import create_access_token
from sentra.db.session import get_db
from sentra.models import User
from sentra.schemas import AuthResponse, User as UserSchema, UserCreate, UserLogin
from sentra.crud.user import get_user_by_email, create_user, authenticate_user

logger = logging.getLogger("sentra.auth")

router = APIRouter()


@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Register a new student account and log it in.
    """
    try:
        logger.info(f"Registration attempt: email={user_in.email}")

        existing_user = await get_user_by_email(db, email=user_in.email)
        if existing_user:
            logger.warning(f"Registration failed - email already registered: email={user_in.email}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )

        user = await create_user(db, obj_in=user_in)
        token = create_access_token(subject=user.id, role=user.role.value)
        logger.info(f"Registration successful: email={user.email}, user_id={user.id}")
        return {
            "message": "Registration successful",
            "token": token,
            "user": user,
        }
    except HTTPException:
        raise
    except Exception as e:
        error_details = traceback.format_exc()
        logger.error(f"Registration error: email={user_in.email}, error={str(e)}\n{error_details}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during registration",
        )


@router.post("/auth/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """
    Exchange email and password for an access token.
    """
    try:
        logger.info(f"Login attempt: email={credentials.email}")
        user = await authenticate_user(db, email=credentials.email, password=credentials.password)

        if not user:
            logger.warning(f"Login failed - incorrect credentials: email={credentials.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        elif not user.is_active:
            logger.warning(f"Login failed - inactive account: email={credentials.email}, user_id={user.id}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account is not active",
                headers={"WWW-Authenticate": "Bearer"},
            )

        token = create_access_token(subject=user.id, role=user.role.value)
        logger.info(f"Login successful: email={credentials.email}, user_id={user.id}")
        return {
            "message": "Login successful",
            "token": token,
            "user": user,
        }
    except HTTPException:
        raise
    except Exception as e:
        error_details = traceback.format_exc()
        logger.error(f"Login error: email={credentials.email}, error={str(e)}\n{error_details}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during login",
        )


@router.get("/auth/me", response_model=UserSchema)
async def read_current_user(
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get current user.
    """
    return current_user
