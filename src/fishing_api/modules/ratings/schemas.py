from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserRatingResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "fcb1ce84-229e-4ea6-9f31-89cf8a5f58af",
                "name": "Ivan Petrov",
                "image": None,
                "rating": 1020,
                "created_at": "2026-04-01T10:00:00",
            }
        },
    )

    id: UUID
    name: str | None
    image: str | None
    rating: int
    created_at: datetime


class TeamRatingResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "2b0f5e0b-6d8a-4a43-9a57-6a2b9f7c1d10",
                "name": "Pike Hunters",
                "logo": None,
                "rating": 990,
                "member_count": 2,
                "created_at": "2026-04-01T10:00:00",
            }
        }
    )

    id: UUID
    name: str
    logo: str | None
    rating: int
    member_count: int
    created_at: datetime


class RatingHistoryEntryResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "7d3b6f51-6c3a-4a84-8f0c-1a2b3c4d5e6f",
                "event_id": "8bcbf808-c8ab-4f75-95e8-f5f0871500af",
                "old_rating": 1000,
                "new_rating": 1020,
                "change": 20,
                "reason": 'Place 1 in "Spring Cup"',
                "created_at": "2026-05-10T19:00:00",
            }
        },
    )

    id: UUID
    event_id: UUID | None
    old_rating: int
    new_rating: int
    change: int
    reason: str
    created_at: datetime


class RatingHistoryListResponse(BaseModel):
    items: list[RatingHistoryEntryResponse]
    total: int
    limit: int
    offset: int
    has_more: bool


class RatingRebuildResponse(BaseModel):
    users_updated: int
    teams_updated: int
