"""
Team news endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_editor
from app.api.endpoints.teams import get_team_or_404
from app.models.team import News
from app.models.user import User
from app.schemas.team import DeleteResponse, NewsCreate, NewsRead, NewsUpdate

router = APIRouter(prefix="/teams/{team_id}/news", tags=["news"])
logger = logging.getLogger(__name__)


async def _get_news_or_404(db: AsyncSession, team_id: int, news_id: int) -> News:
    result = await db.execute(select(News).where(News.id == news_id, News.team_id == team_id))
    item = result.scalar_one_or_none()
    if item is None:
        raise HTTPException(status_code=404, detail="News item not found")
    return item


@router.get("", response_model=list[NewsRead])
async def list_news(
    team_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[News]:
    """Newest first."""
    await get_team_or_404(db, team_id)
    result = await db.execute(
        select(News).where(News.team_id == team_id).order_by(News.created_at.desc(), News.id.desc())
    )
    return list(result.scalars().all())


@router.post("", response_model=NewsRead, status_code=201)
async def create_news(
    team_id: int,
    body: NewsCreate,
    db: AsyncSession = Depends(get_db),
    editor: User = Depends(require_editor),
) -> News:
    await get_team_or_404(db, team_id)
    item = News(team_id=team_id, created_by_id=editor.id, **body.model_dump())
    db.add(item)
    await db.commit()
    await db.refresh(item)
    logger.info("User %d posted news %d for team %d", editor.id, item.id, team_id)
    return item


@router.put("/{news_id}", response_model=NewsRead)
async def update_news(
    team_id: int,
    news_id: int,
    body: NewsUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> News:
    item = await _get_news_or_404(db, team_id, news_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field != "image_url":
            continue
        setattr(item, field, value)

    await db.commit()
    await db.refresh(item)
    logger.info("Updated news %d", news_id)
    return item


@router.delete("/{news_id}", response_model=DeleteResponse)
async def delete_news(
    team_id: int,
    news_id: int,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> DeleteResponse:
    item = await _get_news_or_404(db, team_id, news_id)
    await db.delete(item)
    await db.commit()
    logger.info("Deleted news %d", news_id)
    return DeleteResponse(success=True, message="News deleted successfully")
