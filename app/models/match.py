"""
Match detail models: lineups, reserves, scorers, cards, substitutions and
commentary for a match event.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from app.db.base import Base

SCORER_EVENT_TYPES = ("goal", "own_goal", "penalty")
CARD_TYPES = ("yellow", "red")
COMMENTARY_TYPES = ("highlight", "commentary")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MatchLineup(Base):
    __tablename__ = "match_lineups"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    match_id: int = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)  # type: ignore[assignment]
    player_id: int = Column(Integer, ForeignKey("players.id"), nullable=False)  # type: ignore[assignment]
    position: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class MatchReserve(Base):
    __tablename__ = "match_reserves"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    match_id: int = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)  # type: ignore[assignment]
    player_id: int = Column(Integer, ForeignKey("players.id"), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class MatchScorer(Base):
    __tablename__ = "match_scorers"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    match_id: int = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)  # type: ignore[assignment]
    player_id: int = Column(Integer, ForeignKey("players.id"), nullable=False)  # type: ignore[assignment]
    minute: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    event_type: str = Column(String(20), nullable=False, default="goal")  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class MatchCard(Base):
    __tablename__ = "match_cards"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    match_id: int = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)  # type: ignore[assignment]
    player_id: int = Column(Integer, ForeignKey("players.id"), nullable=False)  # type: ignore[assignment]
    card_type: str = Column(String(10), nullable=False)  # type: ignore[assignment]  # yellow | red
    minute: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    reason: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class MatchSubstitution(Base):
    __tablename__ = "match_substitutions"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    match_id: int = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)  # type: ignore[assignment]
    player_out_id: int = Column(Integer, ForeignKey("players.id"), nullable=False)  # type: ignore[assignment]
    player_in_id: int = Column(Integer, ForeignKey("players.id"), nullable=False)  # type: ignore[assignment]
    minute: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    half: int = Column(Integer, nullable=False, default=1)  # type: ignore[assignment]  # 1 | 2
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class MatchCommentary(Base):
    __tablename__ = "match_commentary"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    match_id: int = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)  # type: ignore[assignment]
    minute: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    type: str = Column(String(20), nullable=False, default="commentary")  # type: ignore[assignment]
    content: str = Column(Text, nullable=False)  # type: ignore[assignment]
    created_by_id: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


# Rows holding a single ``player_id``
PLAYER_DETAIL_MODELS = (MatchLineup, MatchReserve, MatchScorer, MatchCard)
MATCH_DETAIL_MODELS = PLAYER_DETAIL_MODELS + (MatchSubstitution, MatchCommentary)
