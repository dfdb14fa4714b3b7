import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sentra.core.security import get_password_hash, verify_password
from sentra.models import User, UserRole
from sentra.schemas import UserCreate

logger = logging.getLogger("sentra.db")


async def get_user(db: AsyncSession, id: int) -> Optional[User]:
    """
    Get a user by ID.
    """
    result = await db.execute(select(User).filter(User.id == id))
    return result.scalars().first()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """
    Get a user by email.
    """
    result = await db.execute(select(User).filter(User.email == email.lower()))
    return result.scalars().first()


async def create_user(db: AsyncSession, obj_in: UserCreate, role: UserRole = UserRole.STUDENT) -> User:
    """
    Create a new user.
    """
    db_obj = User(
        name=obj_in.name,
        email=obj_in.email.lower(),
        hashed_password=get_password_hash(obj_in.password),
        role=role,
    )
    db.add(db_obj)
    await db.commit()
    await db.refresh(db_obj)
    return db_obj


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """
    Authenticate a user by email and password.
    """
    user = await get_user_by_email(db, email=email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def ensure_admin(db: AsyncSession, email: str, password: str, name: str) -> User:
    """
    Return the admin with this email, creating (or promoting) it when needed.
    """
    user = await get_user_by_email(db, email=email)
    if user is None:
        user = User(
            name=name,
            email=email.lower(),
            hashed_password=get_password_hash(password),
            role=UserRole.ADMIN,
        )
        db.add(user)
        logger.info(f"Admin user created: email={email}")
    elif user.role != UserRole.ADMIN:
        user.role = UserRole.ADMIN
        logger.info(f"User promoted to admin: email={email}")
    else:
        return user

    await db.commit()
    await db.refresh(user)
    return user
