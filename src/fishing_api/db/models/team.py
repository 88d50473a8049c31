from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow


class Team(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(index=True, min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    logo: str | None = Field(default=None, max_length=500)
    owner_id: UUID = Field(foreign_key="user.id", index=True)
    rating: int = Field(default=1000, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
