from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow


class FishCatch(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="fishingevent.id", index=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    species: str = Field(min_length=1, max_length=120)
    weight_kg: float | None = Field(default=None, ge=0)
    length_cm: float | None = Field(default=None, ge=0)
    notes: str | None = Field(default=None, max_length=2000)
    caught_at: datetime = Field(default_factory=utcnow, nullable=False)
