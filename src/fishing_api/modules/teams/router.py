from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from fishing_api.common.ids import parse_team_id
from fishing_api.common.schemas import SuccessResponse
from fishing_api.db.models import User
from fishing_api.deps.auth import get_current_user_dep
from fishing_api.deps.teams import get_teams_service_dep
from fishing_api.modules.teams.schemas import (
    TeamCreateRequest,
    TeamMemberAddRequest,
    TeamMemberResponse,
    TeamResponse,
    TeamUpdateRequest,
)
from fishing_api.modules.teams.service import TeamsService

router = APIRouter(prefix="/teams", tags=["teams"])
TEAMS_SERVICE_DEP = Depends(get_teams_service_dep)
CURRENT_USER_DEP = Depends(get_current_user_dep)
TEAM_ID_DEP = Depends(parse_team_id)
MEMBER_ID_QUERY = Query(..., description="Id of the team membership row to remove.")


@router.get(
    "",
    response_model=list[TeamResponse],
    summary="List My Teams",
    description="Returns the teams the current user owns or belongs to, newest first.",
)
async def get_teams(
    teams_service: TeamsService = TEAMS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> list[TeamResponse]:
    return await teams_service.list_my_teams(current_user.id)


@router.post(
    "",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Team",
    description=(
        "Creates a team owned by the current user. Optional `member_ids` are added in "
        "the same transaction; a team holds at most three members."
    ),
    responses={
        400: {"description": "Too many members."},
        401: {"description": "Missing or invalid access token."},
        404: {"description": "A member id does not exist."},
    },
)
async def post_team(
    request: TeamCreateRequest,
    teams_service: TeamsService = TEAMS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> TeamResponse:
    return await teams_service.create_team(request, owner_id=current_user.id)


@router.get(
    "/{team_id}",
    response_model=TeamResponse,
    summary="Get Team",
    description="Returns a team with its members. Only members may view it.",
    responses={
        403: {"description": "Caller is not a member of the team."},
        404: {"description": "Team not found."},
    },
)
async def get_team(
    team_id: UUID = TEAM_ID_DEP,
    teams_service: TeamsService = TEAMS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> TeamResponse:
    return await teams_service.get_team(team_id, user_id=current_user.id)


@router.patch(
    "/{team_id}",
    response_model=TeamResponse,
    summary="Update Team",
    description="Updates name, description and logo. Owner only.",
    responses={404: {"description": "Team not found or not owned by the caller."}},
)
async def patch_team(
    request: TeamUpdateRequest,
    team_id: UUID = TEAM_ID_DEP,
    teams_service: TeamsService = TEAMS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> TeamResponse:
    return await teams_service.update_team(team_id, request, user_id=current_user.id)


@router.delete(
    "/{team_id}",
    response_model=SuccessResponse,
    summary="Delete Team",
    description="Deletes a team that is not registered for an unfinished event. Owner only.",
    responses={
        400: {"description": "Team takes part in an active event."},
        404: {"description": "Team not found or not owned by the caller."},
    },
)
async def delete_team(
    team_id: UUID = TEAM_ID_DEP,
    teams_service: TeamsService = TEAMS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> SuccessResponse:
    await teams_service.delete_team(team_id, user_id=current_user.id)
    return SuccessResponse()


@router.get(
    "/{team_id}/members",
    response_model=list[TeamMemberResponse],
    summary="List Team Members",
    responses={
        403: {"description": "Caller is not a member of the team."},
        404: {"description": "Team not found."},
    },
)
async def get_team_members(
    team_id: UUID = TEAM_ID_DEP,
    teams_service: TeamsService = TEAMS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> list[TeamMemberResponse]:
    return await teams_service.list_members(team_id, user_id=current_user.id)


@router.post(
    "/{team_id}/members",
    response_model=TeamMemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Team Member",
    description="Adds a registered user by email. Owner only.",
    responses={
        400: {"description": "Team is full or user already a member."},
        404: {"description": "Team or user not found."},
    },
)
async def post_team_member(
    request: TeamMemberAddRequest,
    team_id: UUID = TEAM_ID_DEP,
    teams_service: TeamsService = TEAMS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> TeamMemberResponse:
    return await teams_service.add_member(team_id, request.email, user_id=current_user.id)


@router.delete(
    "/{team_id}/members",
    response_model=SuccessResponse,
    summary="Remove Team Member",
    description="Removes a member other than the owner. Owner only.",
    responses={
        400: {"description": "Owner removal or team in an active event."},
        404: {"description": "Team or member not found."},
    },
)
async def delete_team_member(
    member_id: UUID = MEMBER_ID_QUERY,
    team_id: UUID = TEAM_ID_DEP,
    teams_service: TeamsService = TEAMS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> SuccessResponse:
    await teams_service.remove_member(team_id, member_id, user_id=current_user.id)
    return SuccessResponse()
