from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow


class User(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str | None = Field(default=None, max_length=120)
    email: str = Field(index=True, max_length=255)
    password_hash: str | None = Field(default=None, max_length=255)
    image: str | None = Field(default=None, max_length=500)
    rating: int = Field(default=1000, index=True)

    is_active: bool = Field(default=True, index=True)
    is_admin: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
