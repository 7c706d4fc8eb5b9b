"""Pydantic schemas for accounts and authentication."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.user import Role, normalise_role

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def _clean_email(v: str) -> str:
    # Stored as given (minus surrounding whitespace); lookups are exact
    v = v.strip()
    if "@" not in v or len(v) > 320:
        raise ValueError("Invalid email address")
    return v


def _clean_role(v: str | None) -> str | None:
    if v is None:
        return None
    try:
        return normalise_role(v)
    except ValueError:
        raise ValueError(f"Role must be one of: {[r.value for r in Role]}") from None


# ── Requests ────────────────────────────────────────────────────────
class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: str | None = None

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return _clean_email(v)

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str | None) -> str | None:
        return _clean_role(v)


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LEN)

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return _clean_email(v)


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        return _clean_email(v)


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1, max_length=256)
    new_password: str = Field(
        alias="newPassword", min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )

    model_config = ConfigDict(populate_by_name=True)


class RoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str) -> str:
        return _clean_role(v)  # type: ignore[return-value]


# ── Responses ───────────────────────────────────────────────────────
class UserSummary(BaseModel):
    id: int
    email: str
    role: str

    model_config = {"from_attributes": True}


class UserRead(UserSummary):
    email_verified: bool
    created_at: datetime | None


class AuthResponse(BaseModel):
    message: str
    user: UserSummary


class MessageResponse(BaseModel):
    message: str
