from __future__ import annotations

from datetime import datetime
from uuid import UUID

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fishing_api.db.enums import ParticipantType


class ResultEntryRequest(BaseModel):
    # participant_type and place are checked by the service so that bad
    # values are reported as an invalid results table.
    participant_type: str
    participant_id: UUID
    place: int
    score: float = 0.0


class ResultsSubmitRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "results": [
                    {
                        "participant_type": "user",
                        "participant_id": "fcb1ce84-229e-4ea6-9f31-89cf8a5f58af",
                        "place": 1,
                        "score": 12.4,
                    },
                    {
                        "participant_type": "user",
                        "participant_id": "0b7c2f7a-2f59-4d0b-9d0a-8c8a2a3d6f11",
                        "place": 2,
                        "score": 9.1,
                    },
                ]
            }
        }
    )

    # Shape is checked row by row in the service so that a malformed table
    # answers invalid_results_format rather than a request validation error.
    results: Any = Field(default=None, description="List of result entries.")


class EventResultResponse(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "5e9a1d1c-2b1a-4f7e-bb0e-0b5b8e7b6c21",
                "event_id": "8bcbf808-c8ab-4f75-95e8-f5f0871500af",
                "participant_type": "user",
                "participant_id": "fcb1ce84-229e-4ea6-9f31-89cf8a5f58af",
                "participant_name": "Ivan Petrov",
                "place": 1,
                "score": 12.4,
                "rating_change": 20,
                "created_at": "2026-05-10T19:00:00",
            }
        }
    )

    id: UUID
    event_id: UUID
    participant_type: ParticipantType
    participant_id: UUID
    participant_name: str | None
    place: int
    score: float
    rating_change: int
    created_at: datetime
