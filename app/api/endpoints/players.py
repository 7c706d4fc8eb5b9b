"""
Player statistics, aggregated from the recorded match details.

A season is the calendar year of the match kick-off. A game counts once per
match whether the player started or came on as a substitute. Own goals are
not credited to the player.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.core.timeutil import as_utc
from app.models.match import MatchCard, MatchLineup, MatchScorer, MatchSubstitution
from app.models.team import Event, Player
from app.models.user import User
from app.schemas.match import PlayerStatsRead, SeasonStats

router = APIRouter(prefix="/players", tags=["players"])
logger = logging.getLogger(__name__)

CREDITED_GOAL_TYPES = ("goal", "penalty")


@router.get("/{player_id}/stats", response_model=PlayerStatsRead)
async def get_player_stats(
    player_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> PlayerStatsRead:
    """Games, goals and cards per season, most recent season first, plus totals."""
    player = await db.get(Player, player_id)
    if player is None:
        raise HTTPException(status_code=404, detail="Player not found")

    seasons: dict[int, SeasonStats] = {}

    def season(start) -> SeasonStats:
        year = as_utc(start).year
        if year not in seasons:
            seasons[year] = SeasonStats(season_year=year)
        return seasons[year]

    started = await db.execute(
        select(MatchLineup.match_id, Event.start_date)
        .join(Event, Event.id == MatchLineup.match_id)
        .where(MatchLineup.player_id == player_id)
    )
    came_on = await db.execute(
        select(MatchSubstitution.match_id, Event.start_date)
        .join(Event, Event.id == MatchSubstitution.match_id)
        .where(MatchSubstitution.player_in_id == player_id)
    )
    games = {match_id: start for match_id, start in [*started.all(), *came_on.all()]}
    for start in games.values():
        season(start).games_played += 1

    goals = await db.execute(
        select(Event.start_date)
        .join(MatchScorer, MatchScorer.match_id == Event.id)
        .where(
            MatchScorer.player_id == player_id,
            MatchScorer.event_type.in_(CREDITED_GOAL_TYPES),
        )
    )
    for start in goals.scalars().all():
        season(start).goals += 1

    cards = await db.execute(
        select(MatchCard.card_type, Event.start_date)
        .join(Event, Event.id == MatchCard.match_id)
        .where(MatchCard.player_id == player_id)
    )
    for card_type, start in cards.all():
        if card_type == "red":
            season(start).red_cards += 1
        else:
            season(start).yellow_cards += 1

    ordered = sorted(seasons.values(), key=lambda s: s.season_year, reverse=True)
    logger.debug("Stats for player %d over %d season(s)", player_id, len(ordered))
    return PlayerStatsRead(
        player_id=player_id,
        games_played=sum(s.games_played for s in ordered),
        goals=sum(s.goals for s in ordered),
        yellow_cards=sum(s.yellow_cards for s in ordered),
        red_cards=sum(s.red_cards for s in ordered),
        seasons=ordered,
    )
