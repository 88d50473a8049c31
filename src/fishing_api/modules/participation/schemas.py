from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class IndividualRegistrationRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={"example": {"notes": "Bringing my own boat."}}
    )

    notes: str | None = Field(default=None, max_length=2000)


class TeamRegistrationRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "team_id": "2b0f5e0b-6d8a-4a43-9a57-6a2b9f7c1d10",
                "notes": "We fish from the north pier.",
            }
        }
    )

    team_id: UUID
    notes: str | None = Field(default=None, max_length=2000)


class ParticipantResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "cfa0c2b4-3d44-4f3a-8f0c-0f6f5bb8e4a1",
                "event_id": "8bcbf808-c8ab-4f75-95e8-f5f0871500af",
                "user_id": "fcb1ce84-229e-4ea6-9f31-89cf8a5f58af",
                "name": "Ivan Petrov",
                "contact": "ivan@example.com",
                "notes": None,
                "created_at": "2026-05-02T08:00:00",
            }
        },
    )

    id: UUID
    event_id: UUID
    user_id: UUID
    name: str
    contact: str
    notes: str | None
    created_at: datetime


class TeamParticipationResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "4f1d7f5e-0c55-4a3c-b7b8-1b61b0e2a8f4",
                "event_id": "8bcbf808-c8ab-4f75-95e8-f5f0871500af",
                "team_id": "2b0f5e0b-6d8a-4a43-9a57-6a2b9f7c1d10",
                "team_name": "Pike Hunters",
                "member_count": 2,
                "notes": None,
                "created_at": "2026-05-02T08:00:00",
            }
        }
    )

    id: UUID
    event_id: UUID
    team_id: UUID
    team_name: str
    member_count: int
    notes: str | None
    created_at: datetime
