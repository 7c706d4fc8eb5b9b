"""
Public health check: database and session-store connectivity.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_session_store
from app.core.sessions import RedisSessionStore, SessionStore

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    db: bool
    redis: bool | None  # None when sessions are kept in memory


@router.get("/health", response_model=HealthResponse)
async def health(
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
) -> HealthResponse:
    result = HealthResponse(db=False, redis=None)

    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    if isinstance(store, RedisSessionStore):
        result.redis = await store.ping()

    return result
