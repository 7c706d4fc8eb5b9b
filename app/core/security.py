"""
Password hashing (scrypt via passlib) and opaque token generation.
"""

from __future__ import annotations

import secrets

from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext

from app.core.config import settings

# The stored form is passlib's "$scrypt$ln=..,r=..,p=..$<salt>$<digest>";
# "$" never appears in the base64 salt or digest.
pwd_context = CryptContext(
    schemes=["scrypt"],
    deprecated="auto",
    scrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time check of *plain* against a stored hash.

    A malformed or foreign stored value counts as a mismatch.
    """
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


async def hash_password_async(plain: str) -> str:
    """Hash off the event loop; scrypt is deliberately slow."""
    return await run_in_threadpool(get_password_hash, plain)


async def verify_password_async(plain: str, hashed: str) -> bool:
    return await run_in_threadpool(verify_password, plain, hashed)


# ── Opaque tokens ───────────────────────────────────────────────────
def generate_opaque_token() -> str:
    """URL-safe random capability used for verification and reset links."""
    return secrets.token_urlsafe(settings.VERIFICATION_TOKEN_BYTES)
