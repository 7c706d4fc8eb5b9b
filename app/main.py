"""
Sports Team Manager: application entry point.

Builds the FastAPI app, its process-wide collaborators (session store,
email sender, rate limiter) and the startup / shutdown hooks. Business
logic lives in `api/`, `services/`, `models/` and `core/`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from app.api.api import api_router
from app.api.endpoints.auth import limiter
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.security import hash_password_async
from app.core.sessions import build_session_store
from app.db.base import Base
from app.db.session import async_session_factory, engine

# Imported for their side effect on Base.metadata
from app.models.match import (MatchCard, MatchCommentary, MatchLineup,  # noqa: F401
                              MatchReserve, MatchScorer, MatchSubstitution)
from app.models.team import Event, News, Player, Team  # noqa: F401
from app.models.user import Role, User
from app.services.auth_service import get_dummy_hash
from app.services.email import build_email_sender

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_first_admin() -> None:
    """Create the configured admin account (already verified) if it is missing."""
    async with async_session_factory() as session:
        existing = await session.scalar(
            select(User.id).where(User.email == settings.FIRST_ADMIN_EMAIL)
        )
        if existing is not None:
            return
        session.add(
            User(
                email=settings.FIRST_ADMIN_EMAIL,
                hashed_password=await hash_password_async(settings.FIRST_ADMIN_PASSWORD),
                role=Role.ADMIN.value,
                email_verified=True,
            )
        )
        await session.commit()
    logger.info("Seeded admin account %s (password: <redacted>)", settings.FIRST_ADMIN_EMAIL)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_first_admin()
    # Hash once before the first login miss needs it
    await get_dummy_hash()

    logger.info("🚀 %s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await app.state.session_store.close()
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Teams, players, matches and news with role-based access",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # One session store and one email sender per process
    application.state.session_store = build_session_store(settings)
    application.state.email_sender = build_email_sender(settings)
    application.state.limiter = limiter

    # Credentials on, so the session cookie travels with cross-origin SPA requests
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)
    application.include_router(api_router, prefix=settings.API_PREFIX)
    return application


app = create_app()
