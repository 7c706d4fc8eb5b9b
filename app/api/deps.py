"""
FastAPI dependencies: database session, session store and the auth gate.

``get_current_user`` is the "must be authenticated" check; ``require_role``
builds the "must hold one of these roles" check on top of it. When either
rejects, the route handler is never called.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable, Coroutine
from typing import Any, Optional

from fastapi import Cookie, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.sessions import SessionStore, unsign_session_id
from app.db.session import async_session_factory
from app.models.user import Role, User
from app.services.auth_service import AuthService
from app.services.email import EmailSender


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Process-wide collaborators (created once in create_app) ─────────
def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_email_sender(request: Request) -> EmailSender:
    return request.app.state.email_sender


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
) -> AuthService:
    return AuthService(db, email_sender)


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    session_cookie: Optional[str] = Cookie(default=None, alias=settings.SESSION_COOKIE_NAME),
    store: SessionStore = Depends(get_session_store),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the session cookie to a User, or 401."""
    not_logged_in = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not logged in",
    )

    session_id = unsign_session_id(session_cookie)
    if session_id is None:
        raise not_logged_in

    user_id = await store.resolve(session_id)
    if user_id is None:
        raise not_logged_in

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        # Account deleted while the session was alive
        await store.destroy(session_id)
        raise not_logged_in
    return user


def require_role(*roles: Role) -> Callable[..., Coroutine[Any, Any, User]]:
    """Build a dependency that admits only users holding one of *roles*."""
    allowed = {r.value for r in roles}

    async def _require_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _require_role


require_admin = require_role(Role.ADMIN)
require_editor = require_role(Role.ADMIN, Role.EDITOR)
