"""
Account lifecycle: registration, email verification, login, password reset.

Account states::

    Unregistered --register--> PendingVerification --verify--> Verified
    Verified --forgot_password--> PendingReset --reset_password--> Verified

Error messages for "no such user" and "wrong password" are identical on
purpose, and ``forgot_password`` answers the same way for unknown emails, so
the API cannot be used to enumerate accounts.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import (generate_opaque_token, hash_password_async,
                               verify_password_async)
from app.core.timeutil import as_utc
from app.models.user import Role, User
from app.services.email import (EmailDispatchError, EmailSender,
                                send_password_reset_email,
                                send_verification_email)

logger = logging.getLogger(__name__)

MSG_EMAIL_TAKEN = "Email already registered."
MSG_INVALID_VERIFICATION = "Invalid or expired verification link"
MSG_ALREADY_VERIFIED = "Email already verified"
MSG_INVALID_CREDENTIALS = "Invalid email or password"
MSG_VERIFY_FIRST = "Please verify your email before logging in."
MSG_FORGOT_PASSWORD = (
    "If your email is registered, you'll receive instructions to reset your password."
)
MSG_INVALID_RESET = "Invalid or expired reset token"
MSG_RESET_EXPIRED = "Reset token has expired"


class AuthError(Exception):
    """A business-rule rejection that is safe to show to the client."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


_dummy_hash_value: str | None = None


async def get_dummy_hash() -> str:
    # Lets a lookup miss cost the same as a password comparison
    global _dummy_hash_value
    if _dummy_hash_value is None:
        _dummy_hash_value = await hash_password_async(generate_opaque_token())
    return _dummy_hash_value


class AuthService:
    def __init__(self, db: AsyncSession, email_sender: EmailSender) -> None:
        self.db = db
        self.email_sender = email_sender

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    # ── Registration ────────────────────────────────────────────────
    async def register(self, email: str, password: str, role: str | None = None) -> User:
        """Create an unverified account and email its verification link.

        If the email cannot be sent the new row is deleted again before the
        error propagates, so no account is left that can never be verified.
        """
        if await self.get_user_by_email(email) is not None:
            raise AuthError(MSG_EMAIL_TAKEN)

        token = generate_opaque_token()
        user = User(
            email=email,
            hashed_password=await hash_password_async(password),
            role=role or Role.READER.value,
            email_verified=False,
            verification_token=token,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            await self.db.rollback()
            raise AuthError(MSG_EMAIL_TAKEN) from None
        await self.db.refresh(user)

        try:
            await send_verification_email(self.email_sender, email, token)
        except EmailDispatchError:
            logger.error("Verification email to %s failed; rolling back user %d", email, user.id)
            await self.db.execute(delete(User).where(User.id == user.id))
            await self.db.commit()
            raise

        logger.info("Registered user %d (%s) as %s", user.id, email, user.role)
        return user

    async def verify_email(self, token: str) -> User:
        result = await self.db.execute(select(User).where(User.verification_token == token))
        user = result.scalar_one_or_none()
        if user is None:
            raise AuthError(MSG_INVALID_VERIFICATION)
        if user.email_verified:
            raise AuthError(MSG_ALREADY_VERIFIED)

        result = await self.db.execute(
            update(User)
            .where(User.id == user.id, User.email_verified.is_(False))
            .values(email_verified=True, verification_token=None)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise AuthError(MSG_ALREADY_VERIFIED)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Email verified for user %d", user.id)
        return user

    # ── Login ───────────────────────────────────────────────────────
    async def authenticate(self, email: str, password: str) -> User:
        """Return the user for valid credentials, else raise ``AuthError``.

        Checks run in this order: lookup, verification, password. An existing
        unverified account therefore gets ``MSG_VERIFY_FIRST`` whatever the
        password; a miss and a wrong password both get ``MSG_INVALID_CREDENTIALS``.
        """
        user = await self.get_user_by_email(email)
        if user is None:
            await verify_password_async(password, await get_dummy_hash())
            raise AuthError(MSG_INVALID_CREDENTIALS)
        if not user.email_verified:
            raise AuthError(MSG_VERIFY_FIRST)
        if not await verify_password_async(password, user.hashed_password):
            raise AuthError(MSG_INVALID_CREDENTIALS)
        return user

    # ── Password reset ──────────────────────────────────────────────
    async def forgot_password(self, email: str) -> str:
        user = await self.get_user_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return MSG_FORGOT_PASSWORD

        token = generate_opaque_token()
        # Overwrites any earlier token; only the latest link works
        user.password_reset_token = token
        user.password_reset_expires = datetime.now(timezone.utc) + timedelta(
            minutes=settings.RESET_TOKEN_EXPIRE_MINUTES
        )
        await self.db.commit()

        await send_password_reset_email(self.email_sender, email, token)
        logger.info("Password reset link issued for user %d", user.id)
        return MSG_FORGOT_PASSWORD

    async def reset_password(self, token: str, new_password: str) -> None:
        result = await self.db.execute(select(User).where(User.password_reset_token == token))
        user = result.scalar_one_or_none()
        if user is None or user.password_reset_expires is None:
            raise AuthError(MSG_INVALID_RESET)
        if datetime.now(timezone.utc) > as_utc(user.password_reset_expires):
            raise AuthError(MSG_RESET_EXPIRED)

        hashed = await hash_password_async(new_password)
        result = await self.db.execute(
            update(User)
            .where(User.id == user.id, User.password_reset_token == token)
            .values(
                hashed_password=hashed,
                password_reset_token=None,
                password_reset_expires=None,
            )
        )
        if result.rowcount == 0:
            # Consumed by a concurrent request between our read and write
            await self.db.rollback()
            raise AuthError(MSG_INVALID_RESET)
        await self.db.commit()
        logger.info("Password reset for user %d", user.id)
