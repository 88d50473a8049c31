from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from fishing_api.common.ids import parse_event_id
from fishing_api.common.schemas import SuccessResponse
from fishing_api.db.models import User
from fishing_api.deps.auth import get_current_user_dep
from fishing_api.deps.participation import get_participation_service_dep
from fishing_api.modules.participation.schemas import (
    IndividualRegistrationRequest,
    ParticipantResponse,
    TeamParticipationResponse,
    TeamRegistrationRequest,
)
from fishing_api.modules.participation.service import ParticipationService

router = APIRouter(prefix="/events/{event_id}", tags=["participation"])
PARTICIPATION_SERVICE_DEP = Depends(get_participation_service_dep)
CURRENT_USER_DEP = Depends(get_current_user_dep)
EVENT_ID_DEP = Depends(parse_event_id)
TEAM_ID_QUERY = Query(..., description="Team to unregister.")

_ERROR_EXAMPLE = {
    "error_code": "capacity_reached",
    "message": "The maximum number of participants has been reached.",
    "detail": "The maximum number of participants has been reached.",
    "request_id": "4f4c0c5e-7b73-4a8a-9d4f-b6c7d6d1f001",
}


@router.get(
    "/participants",
    response_model=list[ParticipantResponse],
    summary="List Participants",
    description="Returns individual registrations for the event, oldest first.",
    responses={
        400: {"description": "Malformed event id."},
        404: {"description": "Event not found."},
    },
)
async def get_participants(
    event_id: UUID = EVENT_ID_DEP,
    participation_service: ParticipationService = PARTICIPATION_SERVICE_DEP,
) -> list[ParticipantResponse]:
    participants = await participation_service.list_participants(event_id)
    return [ParticipantResponse.model_validate(participant) for participant in participants]


@router.post(
    "/participants",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register For Event",
    description=(
        "Registers the current user for a solo event. Name and contact are copied "
        "from the user profile."
    ),
    responses={
        201: {"description": "Registered."},
        400: {
            "description": "Wrong format, already registered, member conflict or event full.",
            "content": {"application/json": {"example": _ERROR_EXAMPLE}},
        },
        401: {"description": "Missing or invalid access token."},
        404: {"description": "Event not found."},
    },
)
async def post_participant(
    request: IndividualRegistrationRequest | None = None,
    event_id: UUID = EVENT_ID_DEP,
    participation_service: ParticipationService = PARTICIPATION_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> ParticipantResponse:
    participant = await participation_service.register_individual(
        event_id=event_id,
        user_id=current_user.id,
        notes=request.notes if request is not None else None,
    )
    return ParticipantResponse.model_validate(participant)


@router.delete(
    "/participants",
    response_model=SuccessResponse,
    summary="Unregister From Event",
    description="Removes the current user's individual registration.",
    responses={
        401: {"description": "Missing or invalid access token."},
        404: {"description": "Event not found or user not registered."},
    },
)
async def delete_participant(
    event_id: UUID = EVENT_ID_DEP,
    participation_service: ParticipationService = PARTICIPATION_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> SuccessResponse:
    await participation_service.unregister_individual(event_id=event_id, user_id=current_user.id)
    return SuccessResponse()


@router.get(
    "/team-participations",
    response_model=list[TeamParticipationResponse],
    summary="List Team Participations",
    description="Returns teams registered for the event with their member counts.",
)
async def get_team_participations(
    event_id: UUID = EVENT_ID_DEP,
    participation_service: ParticipationService = PARTICIPATION_SERVICE_DEP,
) -> list[TeamParticipationResponse]:
    return await participation_service.list_team_participations(event_id)


@router.post(
    "/team-participations",
    response_model=TeamParticipationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Team For Event",
    description=(
        "Registers a team for a team_2/team_3 event. The caller must be a team member "
        "and the team size must match the event format."
    ),
    responses={
        201: {"description": "Team registered."},
        400: {"description": "Wrong format, size mismatch, conflict or event full."},
        401: {"description": "Missing or invalid access token."},
        403: {"description": "Caller is not a member of the team."},
        404: {"description": "Event or team not found."},
    },
)
async def post_team_participation(
    request: TeamRegistrationRequest,
    event_id: UUID = EVENT_ID_DEP,
    participation_service: ParticipationService = PARTICIPATION_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> TeamParticipationResponse:
    return await participation_service.register_team(
        event_id=event_id,
        team_id=request.team_id,
        user_id=current_user.id,
        notes=request.notes,
    )


@router.delete(
    "/team-participations",
    response_model=SuccessResponse,
    summary="Unregister Team From Event",
    description="Removes a team registration. Allowed for team members and the event owner.",
    responses={
        401: {"description": "Missing or invalid access token."},
        403: {"description": "Caller is neither a team member nor the event owner."},
        404: {"description": "Event not found or team not registered."},
    },
)
async def delete_team_participation(
    team_id: UUID = TEAM_ID_QUERY,
    event_id: UUID = EVENT_ID_DEP,
    participation_service: ParticipationService = PARTICIPATION_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> SuccessResponse:
    await participation_service.unregister_team(
        event_id=event_id,
        team_id=team_id,
        user_id=current_user.id,
    )
    return SuccessResponse()
