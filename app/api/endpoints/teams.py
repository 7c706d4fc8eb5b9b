"""
Team & Player endpoints.

- GET operations require any authenticated user.
- Creating a team requires admin role.
- Player POST / PUT / DELETE require admin or editor role.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_admin, require_editor
from app.models.match import PLAYER_DETAIL_MODELS, MatchSubstitution
from app.models.team import Player, Team
from app.models.user import User
from app.schemas.team import (DeleteResponse, PlayerCreate, PlayerRead,
                              PlayerUpdate, TeamCreate, TeamRead)

router = APIRouter(prefix="/teams", tags=["teams"])
logger = logging.getLogger(__name__)


async def get_team_or_404(db: AsyncSession, team_id: int) -> Team:
    result = await db.execute(select(Team).where(Team.id == team_id))
    team = result.scalar_one_or_none()
    if team is None:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


async def _get_player_or_404(db: AsyncSession, team_id: int, player_id: int) -> Player:
    result = await db.execute(
        select(Player).where(Player.id == player_id, Player.team_id == team_id)
    )
    player = result.scalar_one_or_none()
    if player is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


# ── Teams ───────────────────────────────────────────────────────────
@router.get("", response_model=list[TeamRead])
async def list_teams(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[Team]:
    result = await db.execute(select(Team).order_by(Team.name))
    return list(result.scalars().all())


@router.post("", response_model=TeamRead, status_code=201)
async def create_team(
    body: TeamCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> Team:
    team = Team(name=body.name, created_by_id=admin.id)
    db.add(team)
    await db.commit()
    await db.refresh(team)
    logger.info("Created team %d (%s) by user %d", team.id, team.name, admin.id)
    return team


@router.get("/{team_id}", response_model=TeamRead)
async def get_team(
    team_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> Team:
    return await get_team_or_404(db, team_id)


# ── Players ─────────────────────────────────────────────────────────
@router.get("/{team_id}/players", response_model=list[PlayerRead])
async def list_players(
    team_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[Player]:
    await get_team_or_404(db, team_id)
    result = await db.execute(
        select(Player).where(Player.team_id == team_id).order_by(Player.number)
    )
    return list(result.scalars().all())


@router.post("/{team_id}/players", response_model=PlayerRead, status_code=201)
async def create_player(
    team_id: int,
    body: PlayerCreate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> Player:
    await get_team_or_404(db, team_id)
    player = Player(team_id=team_id, **body.model_dump())
    db.add(player)
    await db.commit()
    await db.refresh(player)
    logger.info("Created player %d (%s) in team %d", player.id, player.name, team_id)
    return player


@router.put("/{team_id}/players/{player_id}", response_model=PlayerRead)
async def update_player(
    team_id: int,
    player_id: int,
    body: PlayerUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> Player:
    player = await _get_player_or_404(db, team_id, player_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field != "photo_url":
            continue
        setattr(player, field, value)

    await db.commit()
    await db.refresh(player)
    logger.info("Updated player %d", player_id)
    return player


@router.delete("/{team_id}/players/{player_id}", response_model=DeleteResponse)
async def delete_player(
    team_id: int,
    player_id: int,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> DeleteResponse:
    """Delete a player together with their match-detail rows."""
    player = await _get_player_or_404(db, team_id, player_id)
    for model in PLAYER_DETAIL_MODELS:
        await db.execute(delete(model).where(model.player_id == player_id))
    await db.execute(
        delete(MatchSubstitution).where(
            or_(
                MatchSubstitution.player_out_id == player_id,
                MatchSubstitution.player_in_id == player_id,
            )
        )
    )
    await db.delete(player)
    await db.commit()
    logger.info("Deleted player %d (%s)", player_id, player.name)
    return DeleteResponse(success=True, message="Player deleted successfully")
