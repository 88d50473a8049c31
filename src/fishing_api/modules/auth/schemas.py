from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

Email = Annotated[str, Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")]
Password = Annotated[str, Field(min_length=8, max_length=128)]


class AuthRegisterRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Marta Lindqvist",
                "email": "marta@lakeside.example",
                "password": "pike-season-2030",
            }
        }
    )

    name: str | None = Field(default=None, max_length=120)
    email: Email
    password: Password


class AuthLoginRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "marta@lakeside.example", "password": "pike-season-2030"}
        }
    )

    email: Email
    password: str = Field(min_length=1, max_length=128)


class AuthRefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=16, description="Refresh JWT from login or refresh.")


class AuthUserResponse(BaseModel):
    """Public view of an angler; the password hash never leaves the service."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None
    email: str
    image: str | None
    rating: int
    is_active: bool
    is_admin: bool
    created_at: datetime
    updated_at: datetime


class AuthTokenPairResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
