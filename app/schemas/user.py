"""User-related Pydantic schemas."""

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import CamelModel


class UserCreate(CamelModel):
    """Schema for user registration."""

    email: EmailStr
    username: str = Field(..., min_length=4, max_length=30)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if "@" in v:
            raise ValueError("Username cannot be an email")
        if not re.match(r"^[A-Za-z0-9_.-]+$", v):
            raise ValueError("Username may only contain letters, digits, '.', '_' and '-'")
        return v


class UserLogin(CamelModel):
    """Schema for login with email or username."""

    credential: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: str


class TokenResponse(BaseModel):
    """Schema for token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(CamelModel):
    """Schema for user response."""

    id: int
    email: str
    username: str
    first_name: str
    last_name: str
    created_at: datetime
