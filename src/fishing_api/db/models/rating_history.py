from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow


# Ledger rows are append-only. event_id carries no foreign key so that
# history outlives the events it references.


class UserRatingHistory(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    event_id: UUID | None = Field(default=None, index=True)
    old_rating: int
    new_rating: int
    change: int
    reason: str = Field(max_length=500)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)


class TeamRatingHistory(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="team.id", index=True)
    event_id: UUID | None = Field(default=None, index=True)
    old_rating: int
    new_rating: int
    change: int
    reason: str = Field(max_length=500)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
