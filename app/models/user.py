"""
User model: credentials, role-based access control and account lifecycle tokens.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.db.base import Base


class Role(str, enum.Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    READER = "reader"


# Older clients still send "manager" for the editor role
ROLE_ALIASES = {"manager": Role.EDITOR.value}


def normalise_role(value: str) -> str:
    """Map *value* (or its legacy alias) to a Role value; ValueError if unknown."""
    v = ROLE_ALIASES.get(value.strip().lower(), value.strip().lower())
    return Role(v).value


class User(Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    # Uniqueness is enforced here, not just by the pre-check in registration
    email: str = Column(String(320), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(255), nullable=False)  # type: ignore[assignment]
    role: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=Role.READER.value,
        server_default=Role.READER.value,
    )  # admin | editor | reader
    email_verified: bool = Column(  # type: ignore[assignment]
        Boolean, nullable=False, default=False, server_default="false"
    )
    # Non-null only while email_verified is False
    verification_token: str | None = Column(String(128), unique=True, nullable=True)  # type: ignore[assignment]
    # Both null or both set
    password_reset_token: str | None = Column(String(128), unique=True, nullable=True)  # type: ignore[assignment]
    password_reset_expires: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
