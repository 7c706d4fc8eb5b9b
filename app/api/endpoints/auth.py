"""
Auth endpoints: register, verify email, login/logout, password reset.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, HTTPException, Query, Request, Response
from fastapi.responses import PlainTextResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.api.deps import get_auth_service, get_current_user, get_session_store
from app.core.config import settings
from app.core.sessions import (SessionStore, clear_session_cookie,
                               set_session_cookie, unsign_session_id)
from app.models.user import User
from app.schemas.user import (AuthResponse, ForgotPasswordRequest,
                              LoginRequest, MessageResponse, RegisterRequest,
                              ResetPasswordRequest, UserRead, UserSummary)
from app.services.auth_service import (MSG_INVALID_VERIFICATION, AuthError,
                                       AuthService)

# Rate limiter, keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


def _http_error(exc: AuthError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@router.post("/register", response_model=AuthResponse)
@limiter.limit("10/minute")
async def register(
    request: Request,
    body: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Create an account and send its verification email.

    500 if the email cannot be sent; the account is removed in that case.
    """
    try:
        user = await auth.register(body.email, body.password, body.role)
    except AuthError as e:
        raise _http_error(e) from None
    return AuthResponse(
        message="Registration successful. Please check your email to verify your account.",
        user=UserSummary.model_validate(user),
    )


@router.get("/verify-email", response_class=PlainTextResponse)
async def verify_email(
    token: Optional[str] = Query(default=None, max_length=256),
    auth: AuthService = Depends(get_auth_service),
) -> PlainTextResponse:
    if not token:
        raise HTTPException(status_code=400, detail=MSG_INVALID_VERIFICATION)
    try:
        await auth.verify_email(token)
    except AuthError as e:
        raise _http_error(e) from None
    return PlainTextResponse("Email verified successfully. You can now log in.")


@router.post("/login", response_model=AuthResponse)
@limiter.limit("5/minute")
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    session_cookie: Optional[str] = Cookie(default=None, alias=settings.SESSION_COOKIE_NAME),
    auth: AuthService = Depends(get_auth_service),
    store: SessionStore = Depends(get_session_store),
) -> AuthResponse:
    """Check credentials and start a session (HttpOnly cookie)."""
    try:
        user = await auth.authenticate(body.email, body.password)
    except AuthError as e:
        logger.info("Failed login for %s: %s", body.email, e.message)
        raise _http_error(e) from None

    # A fresh id on every login; never reuse one the client brought along
    previous = unsign_session_id(session_cookie)
    if previous is not None:
        await store.destroy(previous)

    session_id = await store.create(user.id)
    set_session_cookie(response, session_id)
    logger.info("User %d logged in", user.id)
    return AuthResponse(message="Login successful", user=UserSummary.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    session_cookie: Optional[str] = Cookie(default=None, alias=settings.SESSION_COOKIE_NAME),
    current_user: User = Depends(get_current_user),
    store: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    """Destroy the server-side session and clear the cookie."""
    session_id = unsign_session_id(session_cookie)
    if session_id is not None:
        await store.destroy(session_id)
    clear_session_cookie(response)
    logger.info("User %d logged out", current_user.id)
    return MessageResponse(message="Logout successful")


@router.get("/user", response_model=UserRead)
async def read_current_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Return profile of the currently authenticated user."""
    return current_user


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("5/minute")
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """Same answer whether or not the email is registered."""
    return MessageResponse(message=await auth.forgot_password(body.email))


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit("10/minute")
async def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    try:
        await auth.reset_password(body.token, body.new_password)
    except AuthError as e:
        raise _http_error(e) from None
    return MessageResponse(
        message="Password reset successful. You can now log in with your new password."
    )
