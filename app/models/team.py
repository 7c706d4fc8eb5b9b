"""
Team, Player, Event & News models: the club's core domain.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from app.db.base import Base

PLAYER_POSITIONS = ("GK", "DEF", "MID", "FWD")
EVENT_TYPES = ("training", "match", "meeting")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Team(Base):
    __tablename__ = "teams"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    created_by_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]


class Player(Base):
    __tablename__ = "players"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    team_id: int = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    position: str = Column(String(3), nullable=False)  # type: ignore[assignment]  # GK | DEF | MID | FWD
    number: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    photo_url: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (Index("ix_events_team_start", "team_id", "start_date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    team_id: int = Column(Integer, ForeignKey("teams.id"), nullable=False)  # type: ignore[assignment]
    title: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    start_date: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    end_date: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    type: str = Column(String(20), nullable=False)  # type: ignore[assignment]  # training | match | meeting
    home_score: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    away_score: int | None = Column(Integer, nullable=True)  # type: ignore[assignment]
    opponent: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    location: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]


class News(Base):
    __tablename__ = "news"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    team_id: int = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)  # type: ignore[assignment]
    title: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    content: str = Column(Text, nullable=False)  # type: ignore[assignment]
    image_url: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    created_by_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
