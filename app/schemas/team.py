"""Pydantic schemas for Team / Player / Event / News."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from app.core.timeutil import as_utc

Position = Literal["GK", "DEF", "MID", "FWD"]
EventType = Literal["training", "match", "meeting"]


def _not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v


# ── Team ────────────────────────────────────────────────────────────
class TeamCreate(BaseModel):
    name: str = Field(max_length=200)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _not_blank(v)


class TeamRead(BaseModel):
    id: int
    name: str
    created_at: datetime | None
    created_by_id: int

    model_config = {"from_attributes": True}


# ── Player ──────────────────────────────────────────────────────────
class PlayerCreate(BaseModel):
    name: str = Field(max_length=200)
    position: Position
    number: int = Field(ge=1, le=99)
    photo_url: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _not_blank(v)


class PlayerUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    position: Position | None = None
    number: int | None = Field(default=None, ge=1, le=99)
    photo_url: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return None if v is None else _not_blank(v)


class PlayerRead(BaseModel):
    id: int
    team_id: int
    name: str
    position: str
    number: int
    photo_url: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


# ── Event ───────────────────────────────────────────────────────────
class EventCreate(BaseModel):
    title: str = Field(max_length=200)
    description: str | None = None
    start_date: datetime
    end_date: datetime
    type: EventType
    home_score: int | None = Field(default=None, ge=0)
    away_score: int | None = Field(default=None, ge=0)
    opponent: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _not_blank(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)  # type: ignore[return-value]

    @model_validator(mode="after")
    def _dates_in_order(self) -> "EventCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    type: EventType | None = None
    home_score: int | None = Field(default=None, ge=0)
    away_score: int | None = Field(default=None, ge=0)
    opponent: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)

    @field_validator("title")
    @classmethod
    def _title(cls, v: str | None) -> str | None:
        return None if v is None else _not_blank(v)

    @field_validator("start_date", "end_date")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class EventRead(BaseModel):
    id: int
    team_id: int
    title: str
    description: str | None
    start_date: datetime
    end_date: datetime
    type: str
    home_score: int | None
    away_score: int | None
    opponent: str | None
    location: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


# ── News ────────────────────────────────────────────────────────────
class NewsCreate(BaseModel):
    title: str = Field(max_length=200)
    content: str
    image_url: str | None = Field(default=None, max_length=500)

    @field_validator("title", "content")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return _not_blank(v)


class NewsUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    content: str | None = None
    image_url: str | None = Field(default=None, max_length=500)

    @field_validator("title", "content")
    @classmethod
    def _required_text(cls, v: str | None) -> str | None:
        return None if v is None else _not_blank(v)


class NewsRead(BaseModel):
    id: int
    team_id: int
    title: str
    content: str
    image_url: str | None
    created_at: datetime | None
    created_by_id: int

    model_config = {"from_attributes": True}


# ── Generic ────────────────────────────────────────────────────────
class DeleteResponse(BaseModel):
    success: bool
    message: str
