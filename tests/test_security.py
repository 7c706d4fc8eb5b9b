"""
Password codec and opaque token tests.
"""

import re

import pytest

from app.core.security import (generate_opaque_token, get_password_hash,
                               hash_password_async, verify_password,
                               verify_password_async)


def test_hash_verifies_only_the_original_password():
    stored = get_password_hash("correct horse")
    assert stored.startswith("$scrypt$")
    assert verify_password("correct horse", stored)
    assert not verify_password("correct horse ", stored)
    assert not verify_password("", stored)


def test_hash_is_salted():
    assert get_password_hash("same") != get_password_hash("same")


@pytest.mark.parametrize("stored", ["", "plaintext", "$scrypt$", "$2b$12$abc"])
def test_malformed_stored_hash_is_a_mismatch(stored):
    """A foreign or truncated stored value never raises, it just fails."""
    assert verify_password("anything", stored) is False


@pytest.mark.asyncio
async def test_async_helpers_match_sync_codec():
    stored = await hash_password_async("off the loop")
    assert await verify_password_async("off the loop", stored)
    assert not await verify_password_async("wrong", stored)
    assert verify_password("off the loop", stored)


def test_opaque_tokens_are_urlsafe_and_unique():
    tokens = {generate_opaque_token() for _ in range(200)}
    assert len(tokens) == 200
    for token in tokens:
        # 32 random bytes -> 43 base64url characters
        assert re.fullmatch(r"[A-Za-z0-9_\-]{43}", token)
