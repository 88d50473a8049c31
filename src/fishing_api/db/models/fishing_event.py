from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON
from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow

from fishing_api.db.enums import EventFormat


class FishingEvent(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    start_date: datetime = Field(nullable=False, index=True)
    end_date: datetime | None = Field(default=None)
    fish_types: list[str] | None = Field(default=None, sa_type=JSON)
    weather: str | None = Field(default=None, max_length=255)
    format: EventFormat = Field(default=EventFormat.SOLO, index=True)
    max_participants: int | None = Field(default=None, ge=1)
    owner_id: UUID = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
