from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from fishing_api.common.ids import parse_event_id
from fishing_api.common.schemas import SuccessResponse
from fishing_api.db.models import User
from fishing_api.deps.auth import get_current_user_dep
from fishing_api.deps.events import get_events_service_dep
from fishing_api.modules.events.schemas import (
    CatchCreateRequest,
    CatchResponse,
    EventCreateRequest,
    EventDetailResponse,
    EventResponse,
    EventUpdateRequest,
)
from fishing_api.modules.events.service import EventsService

router = APIRouter(prefix="/events", tags=["events"])
EVENTS_SERVICE_DEP = Depends(get_events_service_dep)
CURRENT_USER_DEP = Depends(get_current_user_dep)
EVENT_ID_DEP = Depends(parse_event_id)


@router.get(
    "",
    response_model=list[EventResponse],
    summary="List Events",
    description="Returns all events, latest start date first.",
)
async def get_events(
    events_service: EventsService = EVENTS_SERVICE_DEP,
) -> list[EventResponse]:
    events = await events_service.list_events()
    return [EventResponse.model_validate(event) for event in events]


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Event",
    description="Creates an event owned by the current user. Format defaults to solo.",
    responses={
        201: {"description": "Event created."},
        400: {
            "description": "Invalid format or date range.",
            "content": {
                "application/json": {
                    "example": {
                        "error_code": "invalid_format",
                        "message": "Invalid event format 'duo'.",
                        "detail": "Invalid event format 'duo'.",
                        "request_id": "0d7a3f7e-5c43-4c39-8c1c-2a0c9c1f2e10",
                    }
                }
            },
        },
        401: {"description": "Missing or invalid access token."},
    },
)
async def post_event(
    request: EventCreateRequest,
    events_service: EventsService = EVENTS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> EventResponse:
    event = await events_service.create_event(request, owner_id=current_user.id)
    return EventResponse.model_validate(event)


@router.get(
    "/{event_id}",
    response_model=EventDetailResponse,
    summary="Get Event",
    description="Returns an event with its owner, registrations and catches.",
    responses={
        400: {"description": "Malformed event id."},
        404: {"description": "Event not found."},
    },
)
async def get_event(
    event_id: UUID = EVENT_ID_DEP,
    events_service: EventsService = EVENTS_SERVICE_DEP,
) -> EventDetailResponse:
    return await events_service.get_event_detail(event_id)


@router.patch(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update Event",
    description=(
        "Partially updates an event. Only the owner may update; other users get 404. "
        "The format is locked once anyone has registered."
    ),
    responses={
        400: {"description": "Invalid format, format locked or invalid date range."},
        401: {"description": "Missing or invalid access token."},
        404: {"description": "Event not found or not owned by the caller."},
    },
)
async def patch_event(
    request: EventUpdateRequest,
    event_id: UUID = EVENT_ID_DEP,
    events_service: EventsService = EVENTS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> EventResponse:
    event = await events_service.update_event(event_id, request, user_id=current_user.id)
    return EventResponse.model_validate(event)


@router.delete(
    "/{event_id}",
    response_model=SuccessResponse,
    summary="Delete Event",
    description="Deletes an event with its registrations, catches and results.",
    responses={
        401: {"description": "Missing or invalid access token."},
        404: {"description": "Event not found or not owned by the caller."},
    },
)
async def delete_event(
    event_id: UUID = EVENT_ID_DEP,
    events_service: EventsService = EVENTS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> SuccessResponse:
    await events_service.delete_event(event_id, user_id=current_user.id)
    return SuccessResponse()


@router.post(
    "/{event_id}/catches",
    response_model=CatchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record Catch",
    description="Records a catch for a registered participant or the event owner.",
    responses={
        401: {"description": "Missing or invalid access token."},
        403: {"description": "Caller is not registered for the event."},
        404: {"description": "Event not found."},
    },
)
async def post_catch(
    request: CatchCreateRequest,
    event_id: UUID = EVENT_ID_DEP,
    events_service: EventsService = EVENTS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> CatchResponse:
    fish_catch = await events_service.record_catch(event_id, request, user_id=current_user.id)
    return CatchResponse.model_validate(fish_catch)
