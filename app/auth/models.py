# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    Only what the token itself carries, no database lookup.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None


class UserResponse(BaseModel):
    """User profile from the public.users table."""
    id: UUID
    email: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SignInRequest(BaseModel):
    """
    Email/password sign-in.

    Example:
        {"email": "admin@example.com", "password": "secret123"}
    """
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Email là bắt buộc")
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Email không hợp lệ")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Mật khẩu là bắt buộc")
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError("Mật khẩu phải có ít nhất 6 ký tự")
        return v


class SignInResponse(BaseModel):
    """Session tokens returned by Supabase Auth."""
    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    expires_at: int | None = None
    token_type: str = "bearer"
    user: UserResponse
