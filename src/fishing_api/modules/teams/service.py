from __future__ import annotations

import logging
from uuid import UUID

from fishing_api.common.datetime_utils import utcnow
from fishing_api.common.errors import (
    AlreadyTeamMember,
    MemberNotFound,
    NotTeamMember,
    OwnerRemoval,
    TeamFull,
    TeamLocked,
    TeamNotFound,
    UserNotFound,
)
from fishing_api.config.settings import Settings
from fishing_api.db.enums import TeamRole
from fishing_api.db.models import Team, TeamMember, User
from fishing_api.modules.teams.repository import TeamsRepository
from fishing_api.modules.teams.schemas import (
    TeamCreateRequest,
    TeamMemberResponse,
    TeamResponse,
    TeamUpdateRequest,
)

logger = logging.getLogger(__name__)

# Largest supported event format is team_3.
MAX_TEAM_SIZE = 3


def member_response(member: TeamMember, user: User) -> TeamMemberResponse:
    return TeamMemberResponse(
        id=member.id,
        team_id=member.team_id,
        user_id=member.user_id,
        role=member.role,
        joined_at=member.joined_at,
        name=user.name,
        email=user.email,
        image=user.image,
    )


class TeamsService:
    def __init__(self, repository: TeamsRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def create_team(self, payload: TeamCreateRequest, *, owner_id: UUID) -> TeamResponse:
        member_ids = [
            member_id for member_id in dict.fromkeys(payload.member_ids) if member_id != owner_id
        ]
        if len(member_ids) + 1 > MAX_TEAM_SIZE:
            raise TeamFull(f"A team can have at most {MAX_TEAM_SIZE} members.")
        found = {user.id for user in await self.repository.get_users(member_ids)}
        missing = [member_id for member_id in member_ids if member_id not in found]
        if missing:
            raise UserNotFound(f"User not found: {missing[0]}")

        now = utcnow()
        team = Team(
            name=payload.name,
            description=payload.description,
            logo=payload.logo,
            owner_id=owner_id,
            rating=self.settings.rating_default,
            created_at=now,
            updated_at=now,
        )
        try:
            await self.repository.add(team)
            await self.repository.add(
                TeamMember(team_id=team.id, user_id=owner_id, role=TeamRole.OWNER, joined_at=now)
            )
            for member_id in member_ids:
                await self.repository.add(
                    TeamMember(
                        team_id=team.id,
                        user_id=member_id,
                        role=TeamRole.MEMBER,
                        joined_at=now,
                    )
                )
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            "team_created",
            extra={
                "team_id": str(team.id),
                "user_id": str(owner_id),
                "member_count": len(member_ids) + 1,
            },
        )
        return await self._team_response(team)

    async def list_my_teams(self, user_id: UUID) -> list[TeamResponse]:
        teams = await self.repository.list_teams_for_user(user_id)
        return [await self._team_response(team) for team in teams]

    async def get_team(self, team_id: UUID, *, user_id: UUID) -> TeamResponse:
        team = await self._require_team(team_id)
        await self._require_member(team_id, user_id)
        return await self._team_response(team)

    async def list_members(self, team_id: UUID, *, user_id: UUID) -> list[TeamMemberResponse]:
        await self._require_team(team_id)
        await self._require_member(team_id, user_id)
        rows = await self.repository.list_members(team_id)
        return [member_response(member, user) for member, user in rows]

    async def update_team(
        self,
        team_id: UUID,
        payload: TeamUpdateRequest,
        *,
        user_id: UUID,
    ) -> TeamResponse:
        team = await self._get_owned_team(team_id, user_id)
        team.name = payload.name
        team.description = payload.description
        if "logo" in payload.model_fields_set:
            team.logo = payload.logo
        team.updated_at = utcnow()
        await self.repository.add(team)
        await self.repository.commit()
        logger.info("team_updated", extra={"team_id": str(team_id), "user_id": str(user_id)})
        return await self._team_response(team)

    async def delete_team(self, team_id: UUID, *, user_id: UUID) -> None:
        await self._get_owned_team(team_id, user_id)
        if await self.repository.has_active_participation(team_id, now=utcnow()):
            raise TeamLocked("The team cannot be deleted while it takes part in an active event.")
        try:
            await self.repository.delete_team_cascade(team_id)
            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise
        logger.info("team_deleted", extra={"team_id": str(team_id), "user_id": str(user_id)})

    async def add_member(self, team_id: UUID, email: str, *, user_id: UUID) -> TeamMemberResponse:
        await self._get_owned_team(team_id, user_id)
        if await self.repository.count_members(team_id) >= MAX_TEAM_SIZE:
            raise TeamFull(f"A team can have at most {MAX_TEAM_SIZE} members.")
        user = await self.repository.get_user_by_email(email)
        if user is None:
            raise UserNotFound(f"No user with email {email}.")
        if await self.repository.get_membership(team_id, user.id) is not None:
            raise AlreadyTeamMember("The user is already a member of this team.")
        member = TeamMember(team_id=team_id, user_id=user.id, role=TeamRole.MEMBER)
        await self.repository.add(member)
        await self.repository.commit()
        logger.info(
            "team_member_added",
            extra={
                "team_id": str(team_id),
                "user_id": str(user_id),
                "member_user_id": str(user.id),
            },
        )
        return member_response(member, user)

    async def remove_member(self, team_id: UUID, member_id: UUID, *, user_id: UUID) -> None:
        await self._get_owned_team(team_id, user_id)
        member = await self.repository.get_member(team_id, member_id)
        if member is None:
            raise MemberNotFound(f"Team member not found: {member_id}")
        if member.role == TeamRole.OWNER:
            raise OwnerRemoval("The team owner cannot be removed.")
        if await self.repository.has_active_participation(team_id, now=utcnow()):
            raise TeamLocked(
                "Members cannot be removed while the team takes part in an active event."
            )
        await self.repository.delete_member(member.id)
        await self.repository.commit()
        logger.info(
            "team_member_removed",
            extra={
                "team_id": str(team_id),
                "user_id": str(user_id),
                "member_id": str(member_id),
            },
        )

    async def _require_team(self, team_id: UUID) -> Team:
        team = await self.repository.get_team(team_id)
        if team is None:
            raise TeamNotFound(team_id)
        return team

    async def _require_member(self, team_id: UUID, user_id: UUID) -> None:
        if await self.repository.get_membership(team_id, user_id) is None:
            raise NotTeamMember("You are not a member of this team.")

    async def _get_owned_team(self, team_id: UUID, user_id: UUID) -> Team:
        team = await self.repository.get_team(team_id)
        if team is None or team.owner_id != user_id:
            raise TeamNotFound(team_id)
        return team

    async def _team_response(self, team: Team) -> TeamResponse:
        rows = await self.repository.list_members(team.id)
        return TeamResponse(
            id=team.id,
            name=team.name,
            description=team.description,
            logo=team.logo,
            owner_id=team.owner_id,
            rating=team.rating,
            created_at=team.created_at,
            updated_at=team.updated_at,
            members=[member_response(member, user) for member, user in rows],
        )
