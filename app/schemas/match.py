"""Pydantic schemas for match details and per-player match statistics."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

ScorerEventType = Literal["goal", "own_goal", "penalty"]
CardType = Literal["yellow", "red"]
CommentaryType = Literal["highlight", "commentary"]

MAX_MINUTE = 130  # 120 + stoppage
MAX_TIMELINE_MINUTE = 120


# ── Lineup ──────────────────────────────────────────────────────────
class LineupEntry(BaseModel):
    player_id: int
    position: str = Field(min_length=1, max_length=20)


class LineupUpdate(BaseModel):
    players: list[LineupEntry] = Field(max_length=11)

    @field_validator("players")
    @classmethod
    def _unique_players(cls, v: list[LineupEntry]) -> list[LineupEntry]:
        ids = [p.player_id for p in v]
        if len(ids) != len(set(ids)):
            raise ValueError("A player can appear only once in the lineup")
        return v


class LineupRead(LineupEntry):
    id: int

    model_config = {"from_attributes": True}


# ── Reserves ────────────────────────────────────────────────────────
class ReservesUpdate(BaseModel):
    player_ids: list[int]

    @field_validator("player_ids")
    @classmethod
    def _unique_players(cls, v: list[int]) -> list[int]:
        if len(v) != len(set(v)):
            raise ValueError("A player can appear only once among the reserves")
        return v


class ReserveRead(BaseModel):
    id: int
    player_id: int

    model_config = {"from_attributes": True}


# ── Scorers ─────────────────────────────────────────────────────────
class ScorerEntry(BaseModel):
    player_id: int
    minute: int = Field(ge=0, le=MAX_MINUTE)
    event_type: ScorerEventType = "goal"


class ScorersUpdate(BaseModel):
    scorers: list[ScorerEntry]


class ScorerRead(ScorerEntry):
    id: int

    model_config = {"from_attributes": True}


# ── Cards ───────────────────────────────────────────────────────────
class CardEntry(BaseModel):
    player_id: int
    card_type: CardType
    minute: int = Field(ge=0, le=MAX_MINUTE)
    reason: str | None = Field(default=None, max_length=500)


class CardsUpdate(BaseModel):
    cards: list[CardEntry]


class CardRead(CardEntry):
    id: int

    model_config = {"from_attributes": True}


# ── Substitutions ───────────────────────────────────────────────────
class SubstitutionEntry(BaseModel):
    player_out_id: int
    player_in_id: int
    minute: int = Field(ge=0, le=MAX_TIMELINE_MINUTE)
    half: Literal[1, 2] = 1

    @model_validator(mode="after")
    def _different_players(self) -> "SubstitutionEntry":
        if self.player_out_id == self.player_in_id:
            raise ValueError("A player cannot be substituted for themselves")
        return self


class SubstitutionsUpdate(BaseModel):
    substitutions: list[SubstitutionEntry]


class SubstitutionRead(SubstitutionEntry):
    id: int

    model_config = {"from_attributes": True}


# ── Commentary ──────────────────────────────────────────────────────
class CommentaryCreate(BaseModel):
    minute: int = Field(ge=0, le=MAX_TIMELINE_MINUTE)
    type: CommentaryType = "commentary"
    content: str = Field(min_length=1, max_length=2000)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class CommentaryRead(BaseModel):
    id: int
    match_id: int
    minute: int
    type: CommentaryType
    content: str
    created_at: datetime | None

    model_config = {"from_attributes": True}


# ── Aggregate ───────────────────────────────────────────────────────
class MatchDetailsRead(BaseModel):
    match_id: int
    team_id: int
    title: str
    home_score: int | None
    away_score: int | None
    lineup: list[LineupRead]
    reserves: list[ReserveRead]
    scorers: list[ScorerRead]
    cards: list[CardRead]
    substitutions: list[SubstitutionRead]


# ── Player statistics ───────────────────────────────────────────────
class SeasonStats(BaseModel):
    season_year: int
    games_played: int = 0
    goals: int = 0
    yellow_cards: int = 0
    red_cards: int = 0


class PlayerStatsRead(BaseModel):
    player_id: int
    games_played: int
    goals: int
    yellow_cards: int
    red_cards: int
    seasons: list[SeasonStats]
