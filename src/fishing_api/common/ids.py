from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status


def parse_event_id(event_id: str) -> UUID:
    """Path dependency: reject malformed event ids with 400 instead of 422."""
    try:
        return UUID(event_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid event id.",
        ) from exc


def parse_team_id(team_id: str) -> UUID:
    try:
        return UUID(team_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid team id.",
        ) from exc


def parse_user_id(user_id: str) -> UUID:
    try:
        return UUID(user_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user id.",
        ) from exc
