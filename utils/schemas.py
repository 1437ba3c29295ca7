"""
Pydantic schemas for the auth and profile API.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator, model_validator

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# bcrypt only accepts the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    user_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    account: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)]
    email: Annotated[
        str, StringConstraints(strip_whitespace=True, max_length=100, pattern=_EMAIL_PATTERN)
    ]
    password: str = Field(..., min_length=6, max_length=MAX_PASSWORD_BYTES)
    confirm_password: str
    gender: str = Field("", max_length=20)
    id_number: str = Field("", max_length=32)
    cellphone: str = Field("", max_length=32)
    address: str = Field("", max_length=200)
    date_of_birth: Optional[date] = None
    introduction: Optional[str] = Field(None, max_length=1000)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
        return value

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("password and confirm_password do not match")
        return self


class LoginRequest(BaseModel):
    account: str = Field(..., min_length=1, description="Login account or email")
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class UpdateProfileRequest(BaseModel):
    nickname: Optional[str] = Field(None, max_length=50)
    gender: Optional[str] = Field(None, max_length=20)
    cellphone: Optional[str] = Field(None, max_length=32)
    address: Optional[str] = Field(None, max_length=200)
    date_of_birth: Optional[date] = None
    bio: Optional[str] = Field(None, max_length=500)


# ═══════════════════════════════════════════════════════════════════════════════
# Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


class AuthError(str, Enum):
    DUPLICATE_IDENTITY = "duplicate_identity"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_DISABLED = "account_disabled"
    INVALID_TOKEN = "invalid_token"


class RegisterResult(BaseModel):
    success: bool
    message: str
    user_id: Optional[int] = None
    error: Optional[AuthError] = None
    field: Optional[str] = None  # "account" | "user_name" | "email"


class LoginResult(BaseModel):
    """Outcome of login and refresh; token fields are set only on success."""

    success: bool
    message: str
    user_id: Optional[int] = None
    token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_type: str = "Bearer"
    expires_at: Optional[datetime] = None
    error: Optional[AuthError] = None


# ═══════════════════════════════════════════════════════════════════════════════
# Aggregated profile
# ═══════════════════════════════════════════════════════════════════════════════


class UserProfile(BaseModel):
    user_id: int
    user_name: str
    account: str
    email: str
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    is_active: bool = True
    is_email_verified: bool = False

    # introduction
    nickname: str = ""
    gender: str = ""
    cellphone: str = ""
    address: str = ""
    date_of_birth: Optional[date] = None
    bio: str = ""

    # rights
    user_status: bool = False
    shopping_permission: bool = False
    message_permission: bool = False
    sales_authority: bool = False

    # wallet
    points: int = 0


class PublicUserProfile(BaseModel):
    """Subset of ``UserProfile`` that other users may see; no contact fields."""

    user_id: int
    user_name: str
    nickname: str = ""
    gender: str = ""
    bio: str = ""
    created_at: Optional[datetime] = None
