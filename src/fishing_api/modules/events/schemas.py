from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fishing_api.db.enums import EventFormat
from fishing_api.modules.participation.schemas import (
    ParticipantResponse,
    TeamParticipationResponse,
)


class EventCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Spring Cup",
                "description": "Open pike tournament on the lake.",
                "latitude": 55.75,
                "longitude": 37.61,
                "start_date": "2026-05-10T06:00:00Z",
                "end_date": "2026-05-10T18:00:00Z",
                "fish_types": ["pike", "perch"],
                "weather": "cloudy",
                "format": "solo",
                "max_participants": 20,
            }
        }
    )

    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    start_date: datetime
    end_date: datetime | None = None
    fish_types: list[str] | None = None
    weather: str | None = Field(default=None, max_length=255)
    # Plain string so unknown formats surface as a 400 from the service.
    format: str = EventFormat.SOLO.value
    max_participants: int | None = Field(default=None, ge=1)


class EventUpdateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Spring Cup (moved)", "max_participants": 30}}
    )

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    fish_types: list[str] | None = None
    weather: str | None = Field(default=None, max_length=255)
    format: str | None = None
    max_participants: int | None = Field(default=None, ge=1)


class EventResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "8bcbf808-c8ab-4f75-95e8-f5f0871500af",
                "title": "Spring Cup",
                "description": "Open pike tournament on the lake.",
                "latitude": 55.75,
                "longitude": 37.61,
                "start_date": "2026-05-10T06:00:00",
                "end_date": "2026-05-10T18:00:00",
                "fish_types": ["pike", "perch"],
                "weather": "cloudy",
                "format": "solo",
                "max_participants": 20,
                "owner_id": "fcb1ce84-229e-4ea6-9f31-89cf8a5f58af",
                "created_at": "2026-04-01T10:00:00",
                "updated_at": "2026-04-01T10:00:00",
            }
        },
    )

    id: UUID
    title: str
    description: str | None
    latitude: float
    longitude: float
    start_date: datetime
    end_date: datetime | None
    fish_types: list[str] | None
    weather: str | None
    format: EventFormat
    max_participants: int | None
    owner_id: UUID
    created_at: datetime
    updated_at: datetime


class OwnerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None
    email: str
    image: str | None


class CatchCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "species": "pike",
                "weight_kg": 3.4,
                "length_cm": 71.0,
                "caught_at": "2026-05-10T09:15:00Z",
            }
        }
    )

    species: str = Field(min_length=1, max_length=120)
    weight_kg: float | None = Field(default=None, ge=0)
    length_cm: float | None = Field(default=None, ge=0)
    caught_at: datetime | None = None
    notes: str | None = Field(default=None, max_length=2000)


class CatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    event_id: UUID
    user_id: UUID
    species: str
    weight_kg: float | None
    length_cm: float | None
    notes: str | None
    caught_at: datetime


class EventDetailResponse(EventResponse):
    owner: OwnerSummary | None
    participants: list[ParticipantResponse]
    team_participations: list[TeamParticipationResponse]
    catches: list[CatchResponse]
