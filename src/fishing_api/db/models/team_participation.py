from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow


class TeamParticipation(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("event_id", "team_id", name="uq_team_participations_event_team"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="fishingevent.id", index=True)
    team_id: UUID = Field(foreign_key="team.id", index=True)
    notes: str | None = Field(default=None, max_length=2000)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
