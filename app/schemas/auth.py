"""Request/response schemas for auth endpoints."""

import re
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from app.models import UserRole
from app.schemas.common import CamelModel

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
NAME_MIN_LEN = 2
NAME_MAX_LEN = 100
EMAIL_MAX_LEN = 255

_PASSWORD_STRENGTH_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


class RegisterRequest(CamelModel):
    """New account details."""

    email: EmailStr = Field(..., max_length=EMAIL_MAX_LEN, description="Email (case-insensitive)")
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    name: str = Field(..., description="Display name")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not _PASSWORD_STRENGTH_RE.match(v):
            raise ValueError(
                "Password must contain at least one lowercase letter, "
                "one uppercase letter, and one number"
            )
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not (NAME_MIN_LEN <= len(v) <= NAME_MAX_LEN):
            raise ValueError(
                f"Name must be between {NAME_MIN_LEN} and {NAME_MAX_LEN} characters"
            )
        return v


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: EmailStr
    password: str = Field(..., min_length=1, description="Password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class RefreshTokenRequest(CamelModel):
    """Body for refresh and logout."""

    refresh_token: str = Field(..., min_length=1, description="Refresh token from login/register/refresh")


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class UserOut(CamelModel):
    """User as returned to clients (never includes the password hash)."""

    id: int
    email: str
    name: str
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResult(CamelModel):
    user: UserOut
    tokens: TokenPair


class CurrentUser(CamelModel):
    """Authenticated identity decoded from the access token."""

    id: int
    email: str
    role: UserRole
