from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow

from fishing_api.db.enums import ParticipantType


class EventResult(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="fishingevent.id", index=True)
    participant_type: ParticipantType = Field(index=True)
    participant_id: UUID = Field(index=True)
    place: int = Field(ge=1)
    score: float = Field(default=0.0)
    rating_change: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
