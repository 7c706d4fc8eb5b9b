"""
Match detail endpoints: lineup, reserves, scorers, cards, substitutions and
commentary of a match.

Every PUT replaces the whole list for that match; commentary is appended one
entry at a time. Only events of type ``match`` have details, and only players
of the event's team may appear.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_editor
from app.models.match import (MatchCard, MatchCommentary, MatchLineup,
                              MatchReserve, MatchScorer, MatchSubstitution)
from app.models.team import Event, Player
from app.models.user import User
from app.schemas.match import (CardRead, CardsUpdate, CommentaryCreate,
                               CommentaryRead, LineupRead, LineupUpdate,
                               MatchDetailsRead, ReserveRead, ReservesUpdate,
                               ScorerRead, ScorersUpdate, SubstitutionRead,
                               SubstitutionsUpdate)

router = APIRouter(prefix="/matches/{match_id}", tags=["matches"])
logger = logging.getLogger(__name__)


async def _get_match_or_404(db: AsyncSession, match_id: int) -> Event:
    result = await db.execute(select(Event).where(Event.id == match_id))
    event = result.scalar_one_or_none()
    if event is None:
        raise HTTPException(status_code=404, detail="Match not found")
    if event.type != "match":
        raise HTTPException(status_code=400, detail="Event is not a match")
    return event


async def _check_players_in_team(db: AsyncSession, team_id: int, player_ids: set[int]) -> None:
    if not player_ids:
        return
    result = await db.execute(
        select(Player.id).where(Player.id.in_(player_ids), Player.team_id == team_id)
    )
    missing = player_ids - set(result.scalars().all())
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Players not in this team: {sorted(missing)}",
        )


async def _player_ids(db: AsyncSession, model, match_id: int) -> set[int]:
    result = await db.execute(select(model.player_id).where(model.match_id == match_id))
    return set(result.scalars().all())


async def _details(db: AsyncSession, event: Event) -> MatchDetailsRead:
    async def rows(model):
        result = await db.execute(
            select(model).where(model.match_id == event.id).order_by(model.id)
        )
        return list(result.scalars().all())

    scorers = await rows(MatchScorer)
    cards = await rows(MatchCard)
    substitutions = await rows(MatchSubstitution)
    return MatchDetailsRead(
        match_id=event.id,
        team_id=event.team_id,
        title=event.title,
        home_score=event.home_score,
        away_score=event.away_score,
        lineup=[LineupRead.model_validate(r) for r in await rows(MatchLineup)],
        reserves=[ReserveRead.model_validate(r) for r in await rows(MatchReserve)],
        scorers=[ScorerRead.model_validate(r) for r in sorted(scorers, key=lambda s: s.minute)],
        cards=[CardRead.model_validate(r) for r in sorted(cards, key=lambda c: c.minute)],
        substitutions=[
            SubstitutionRead.model_validate(r)
            for r in sorted(substitutions, key=lambda s: (s.half, s.minute))
        ],
    )


@router.get("/details", response_model=MatchDetailsRead)
async def get_match_details(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> MatchDetailsRead:
    event = await _get_match_or_404(db, match_id)
    return await _details(db, event)


@router.put("/lineup", response_model=MatchDetailsRead)
async def replace_lineup(
    match_id: int,
    body: LineupUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> MatchDetailsRead:
    event = await _get_match_or_404(db, match_id)
    ids = {p.player_id for p in body.players}
    await _check_players_in_team(db, event.team_id, ids)
    clash = ids & await _player_ids(db, MatchReserve, match_id)
    if clash:
        raise HTTPException(status_code=400, detail=f"Players already on the bench: {sorted(clash)}")

    await db.execute(delete(MatchLineup).where(MatchLineup.match_id == match_id))
    db.add_all(
        MatchLineup(match_id=match_id, player_id=p.player_id, position=p.position)
        for p in body.players
    )
    await db.commit()
    logger.info("Lineup for match %d set (%d players)", match_id, len(body.players))
    return await _details(db, event)


@router.put("/reserves", response_model=MatchDetailsRead)
async def replace_reserves(
    match_id: int,
    body: ReservesUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> MatchDetailsRead:
    event = await _get_match_or_404(db, match_id)
    ids = set(body.player_ids)
    await _check_players_in_team(db, event.team_id, ids)
    clash = ids & await _player_ids(db, MatchLineup, match_id)
    if clash:
        raise HTTPException(status_code=400, detail=f"Players already in the lineup: {sorted(clash)}")

    await db.execute(delete(MatchReserve).where(MatchReserve.match_id == match_id))
    db.add_all(MatchReserve(match_id=match_id, player_id=pid) for pid in body.player_ids)
    await db.commit()
    logger.info("Reserves for match %d set (%d players)", match_id, len(body.player_ids))
    return await _details(db, event)


@router.put("/scorers", response_model=MatchDetailsRead)
async def replace_scorers(
    match_id: int,
    body: ScorersUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> MatchDetailsRead:
    event = await _get_match_or_404(db, match_id)
    await _check_players_in_team(db, event.team_id, {s.player_id for s in body.scorers})

    await db.execute(delete(MatchScorer).where(MatchScorer.match_id == match_id))
    db.add_all(MatchScorer(match_id=match_id, **s.model_dump()) for s in body.scorers)
    await db.commit()
    logger.info("Scorers for match %d set (%d entries)", match_id, len(body.scorers))
    return await _details(db, event)


@router.put("/cards", response_model=MatchDetailsRead)
async def replace_cards(
    match_id: int,
    body: CardsUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> MatchDetailsRead:
    event = await _get_match_or_404(db, match_id)
    await _check_players_in_team(db, event.team_id, {c.player_id for c in body.cards})

    await db.execute(delete(MatchCard).where(MatchCard.match_id == match_id))
    db.add_all(MatchCard(match_id=match_id, **c.model_dump()) for c in body.cards)
    await db.commit()
    logger.info("Cards for match %d set (%d entries)", match_id, len(body.cards))
    return await _details(db, event)


@router.put("/substitutions", response_model=MatchDetailsRead)
async def replace_substitutions(
    match_id: int,
    body: SubstitutionsUpdate,
    db: AsyncSession = Depends(get_db),
    _editor: User = Depends(require_editor),
) -> MatchDetailsRead:
    event = await _get_match_or_404(db, match_id)
    ids = {s.player_out_id for s in body.substitutions} | {
        s.player_in_id for s in body.substitutions
    }
    await _check_players_in_team(db, event.team_id, ids)

    await db.execute(delete(MatchSubstitution).where(MatchSubstitution.match_id == match_id))
    db.add_all(MatchSubstitution(match_id=match_id, **s.model_dump()) for s in body.substitutions)
    await db.commit()
    logger.info("Substitutions for match %d set (%d entries)", match_id, len(body.substitutions))
    return await _details(db, event)


@router.get("/commentary", response_model=list[CommentaryRead])
async def list_commentary(
    match_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[MatchCommentary]:
    await _get_match_or_404(db, match_id)
    result = await db.execute(
        select(MatchCommentary)
        .where(MatchCommentary.match_id == match_id)
        .order_by(MatchCommentary.minute, MatchCommentary.id)
    )
    return list(result.scalars().all())


@router.post("/commentary", response_model=CommentaryRead, status_code=201)
async def add_commentary(
    match_id: int,
    body: CommentaryCreate,
    db: AsyncSession = Depends(get_db),
    editor: User = Depends(require_editor),
) -> MatchCommentary:
    await _get_match_or_404(db, match_id)
    entry = MatchCommentary(match_id=match_id, created_by_id=editor.id, **body.model_dump())
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    logger.info("Commentary added to match %d at minute %d", match_id, entry.minute)
    return entry
