from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from fishing_api.common.datetime_utils import utcnow

from fishing_api.db.enums import TeamRole


class TeamMember(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    team_id: UUID = Field(foreign_key="team.id", index=True)
    user_id: UUID = Field(foreign_key="user.id", index=True)
    role: TeamRole = Field(default=TeamRole.MEMBER, index=True)
    joined_at: datetime = Field(default_factory=utcnow, nullable=False)
