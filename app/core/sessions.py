"""
Server-side sessions: opaque ids in an HttpOnly cookie, user ids on the server.

The store is chosen once per process by ``build_session_store``. The memory
backend loses every session on restart; the Redis backend survives restarts.
"""

from __future__ import annotations

import abc
import logging
import secrets
import time

import redis.asyncio as aioredis
from fastapi import Response
from itsdangerous import BadSignature, URLSafeSerializer
from redis.exceptions import RedisError

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

_SESSION_ID_BYTES = 32


def _new_session_id() -> str:
    return secrets.token_urlsafe(_SESSION_ID_BYTES)


# ── Stores ──────────────────────────────────────────────────────────
class SessionStore(abc.ABC):
    """Maps opaque session ids to user ids with a sliding idle expiry."""

    def __init__(self, idle_seconds: int) -> None:
        self.idle_seconds = idle_seconds

    @abc.abstractmethod
    async def create(self, user_id: int) -> str:
        """Store a new session for *user_id* and return its id."""

    @abc.abstractmethod
    async def resolve(self, session_id: str) -> int | None:
        """Return the user id, or ``None`` if unknown or expired."""

    @abc.abstractmethod
    async def destroy(self, session_id: str) -> None:
        """Remove the session. Unknown ids are ignored."""

    async def close(self) -> None:
        return None


class MemorySessionStore(SessionStore):
    def __init__(self, idle_seconds: int) -> None:
        super().__init__(idle_seconds)
        self._sessions: dict[str, tuple[int, float]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def create(self, user_id: int) -> str:
        self._purge_expired()
        session_id = _new_session_id()
        self._sessions[session_id] = (user_id, time.monotonic() + self.idle_seconds)
        return session_id

    async def resolve(self, session_id: str) -> int | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        user_id, expires_at = entry
        now = time.monotonic()
        if now >= expires_at:
            self._sessions.pop(session_id, None)
            return None
        self._sessions[session_id] = (user_id, now + self.idle_seconds)
        return user_id

    async def destroy(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def _purge_expired(self) -> None:
        now = time.monotonic()
        expired = [sid for sid, (_, exp) in self._sessions.items() if exp <= now]
        for sid in expired:
            del self._sessions[sid]


class RedisSessionStore(SessionStore):
    KEY_PREFIX = "session:"

    def __init__(self, client: aioredis.Redis, idle_seconds: int) -> None:
        super().__init__(idle_seconds)
        self._client = client

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    async def create(self, user_id: int) -> str:
        session_id = _new_session_id()
        await self._client.set(self._key(session_id), str(user_id), ex=self.idle_seconds)
        return session_id

    async def resolve(self, session_id: str) -> int | None:
        key = self._key(session_id)
        raw = await self._client.get(key)
        if raw is None:
            return None
        await self._client.expire(key, self.idle_seconds)
        try:
            return int(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding corrupt session entry")
            await self._client.delete(key)
            return None

    async def destroy(self, session_id: str) -> None:
        await self._client.delete(self._key(session_id))

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.error("Health check Redis failure: %s", e)
            return False

    async def close(self) -> None:
        await self._client.aclose()


def build_session_store(cfg: Settings = settings) -> SessionStore:
    idle_seconds = cfg.SESSION_IDLE_MINUTES * 60
    if cfg.SESSION_BACKEND == "redis":
        logger.info("Using Redis session store")
        return RedisSessionStore(aioredis.from_url(cfg.REDIS_URL), idle_seconds)
    logger.info("Using in-memory session store (sessions reset on restart)")
    return MemorySessionStore(idle_seconds)


# ── Cookie signing ──────────────────────────────────────────────────
def _serializer() -> URLSafeSerializer:
    return URLSafeSerializer(settings.SECRET_KEY, salt="session")


def sign_session_id(session_id: str) -> str:
    return _serializer().dumps(session_id)


def unsign_session_id(cookie_value: str | None) -> str | None:
    """Return the session id if the cookie signature is valid, else ``None``."""
    if not cookie_value:
        return None
    try:
        session_id = _serializer().loads(cookie_value)
    except BadSignature:
        return None
    if not isinstance(session_id, str) or not session_id:
        return None
    return session_id


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=sign_session_id(session_id),
        httponly=True,
        secure=settings.COOKIE_SECURE,  # Set to True in HTTPS production
        samesite="lax",
        max_age=settings.SESSION_IDLE_MINUTES * 60,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
