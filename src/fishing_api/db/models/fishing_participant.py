from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow


class FishingParticipant(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_fishing_participants_event_user"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="fishingevent.id", index=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    # Snapshot of the profile at registration time; not kept in sync.
    name: str = Field(max_length=255)
    contact: str = Field(default="", max_length=255)
    notes: str | None = Field(default=None, max_length=2000)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
