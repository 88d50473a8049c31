from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fishing_api.db.enums import TeamRole


class TeamCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Pike Hunters",
                "description": "Weekend lake crew.",
                "member_ids": ["0b7c2f7a-2f59-4d0b-9d0a-8c8a2a3d6f11"],
            }
        }
    )

    name: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    logo: str | None = Field(default=None, max_length=500)
    member_ids: list[UUID] = Field(default_factory=list)


class TeamUpdateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    logo: str | None = Field(default=None, max_length=500)


class TeamMemberAddRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={"example": {"email": "angler@example.com"}})

    email: str = Field(min_length=3, max_length=255)


class TeamMemberResponse(BaseModel):
    id: UUID
    team_id: UUID
    user_id: UUID
    role: TeamRole
    joined_at: datetime
    name: str | None
    email: str
    image: str | None


class TeamResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "2b0f5e0b-6d8a-4a43-9a57-6a2b9f7c1d10",
                "name": "Pike Hunters",
                "description": "Weekend lake crew.",
                "logo": None,
                "owner_id": "fcb1ce84-229e-4ea6-9f31-89cf8a5f58af",
                "rating": 1000,
                "created_at": "2026-04-01T10:00:00",
                "updated_at": "2026-04-01T10:00:00",
                "members": [],
            }
        }
    )

    id: UUID
    name: str
    description: str | None
    logo: str | None
    owner_id: UUID
    rating: int
    created_at: datetime
    updated_at: datetime
    members: list[TeamMemberResponse]
