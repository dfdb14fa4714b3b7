from typing import Optional
from pydantic import EmailStr, Field, field_validator
import re

from sentra.models.user import UserRole
from sentra.schemas.base import CamelModel, ORMModel


# Properties to receive on registration
class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        if not re.search(r"[A-Za-z]", v):
            raise ValueError("Password must contain at least one letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one digit")
        return v


# Properties for user login
class UserLogin(CamelModel):
    email: EmailStr
    password: str


# Properties to return to client
class User(ORMModel):
    id: int = Field(..., serialization_alias="_id")
    name: str
    email: str
    role: UserRole
    is_active: bool = True


# Reporter details embedded in incidents
class UserSummary(ORMModel):
    id: int = Field(..., serialization_alias="_id")
    name: str
    email: str


class AuthResponse(ORMModel):
    message: str
    token: str
    user: User


# Token payload
class TokenPayload(CamelModel):
    sub: Optional[int] = None
    role: Optional[UserRole] = None
