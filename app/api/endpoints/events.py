"""
Event endpoints: trainings, matches and meetings of a team.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_editor
from app.api.endpoints.teams import get_team_or_404
from app.core.timeutil import as_utc
from app.models.match import MATCH_DETAIL_MODELS
from app.models.team import Event
from app.models.user import User
from app.schemas.team import DeleteResponse, EventCreate, EventRead, EventUpdate

router = APIRouter(prefix="/teams/{team_id}", tags=["events"])
logger = logging.getLogger(__name__)


async def _get_event_or_404(db: AsyncSession, team_id: int, event_id: int) -> Event:
    result = await db.execute(
        select(Event).where(Event.id == event_id, Event.team_id == team_id)
    )
    event = result.scalar_one_or_none()
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("/events", response_model=list[EventRead])
async def list_events(
    team_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[Event]:
    await get_team_or_404(db, team_id)
    result = await db.execute(
        select(Event).where(Event.team_id == team_id).order_by(Event.start_date)
    )
    return list(result.scalars().all())


@router.get("/next-match", response_model=EventRead | None)
async def next_match(
    team_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> Event | None:
    """Earliest match that has not started yet, or ``null``."""
    await get_team_or_404(db, team_id)
    result = await db.execute(
        select(Event)
        .where(
            Event.team_id == team_id,
            Event.type == "match",
            Event.start_date >= datetime.now(timezone.utc),
        )
        .order_by(Event.start_date)
        .limit(1)
    )
    return result.scalar_one_or_none()


@router.post("/events", response_model=EventRead, status_code=201)
async def create_event(
    team_id: int,
    body: EventCreate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> Event:
    await get_team_or_404(db, team_id)
    event = Event(team_id=team_id, **body.model_dump())
    db.add(event)
    await db.commit()
    await db.refresh(event)
    logger.info("Created %s event %d for team %d", event.type, event.id, team_id)
    return event


@router.get("/events/{event_id}", response_model=EventRead)
async def get_event(
    team_id: int,
    event_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> Event:
    return await _get_event_or_404(db, team_id, event_id)


@router.put("/events/{event_id}", response_model=EventRead)
async def update_event(
    team_id: int,
    event_id: int,
    body: EventUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> Event:
    event = await _get_event_or_404(db, team_id, event_id)
    changes = body.model_dump(exclude_unset=True)

    start = changes.get("start_date") or as_utc(event.start_date)
    end = changes.get("end_date") or as_utc(event.end_date)
    if end < start:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    for field, value in changes.items():
        # Scores and free-text fields may be cleared; required fields may not
        if value is None and field in ("title", "start_date", "end_date", "type"):
            continue
        setattr(event, field, value)

    await db.commit()
    await db.refresh(event)
    logger.info("Updated event %d", event_id)
    return event


@router.delete("/events/{event_id}", response_model=DeleteResponse)
async def delete_event(
    team_id: int,
    event_id: int,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> DeleteResponse:
    """Delete an event together with any match details recorded for it."""
    event = await _get_event_or_404(db, team_id, event_id)
    for model in MATCH_DETAIL_MODELS:
        await db.execute(delete(model).where(model.match_id == event_id))
    await db.delete(event)
    await db.commit()
    logger.info("Deleted event %d (%s)", event_id, event.title)
    return DeleteResponse(success=True, message="Event deleted successfully")
