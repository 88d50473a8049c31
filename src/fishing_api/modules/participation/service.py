from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from fishing_api.common.errors import (
    AlreadyRegistered,
    CapacityReached,
    EventNotFound,
    MemberConflict,
    NotAuthorized,
    NotRegistered,
    NotTeamMember,
    TeamNotFound,
    TeamSizeMismatch,
    UserNotFound,
    WrongFormat,
)
from fishing_api.db.enums import EventFormat
from fishing_api.db.models import FishingEvent, FishingParticipant, TeamParticipation
from fishing_api.modules.participation.repository import ParticipationRepository
from fishing_api.modules.participation.schemas import TeamParticipationResponse

logger = logging.getLogger(__name__)

UNKNOWN_PARTICIPANT_NAME = "Unknown participant"


class ParticipationService:
    def __init__(self, repository: ParticipationRepository) -> None:
        self.repository = repository

    async def list_participants(self, event_id: UUID) -> list[FishingParticipant]:
        await self._require_event(event_id)
        return await self.repository.list_participants(event_id)

    async def list_team_participations(self, event_id: UUID) -> list[TeamParticipationResponse]:
        await self._require_event(event_id)
        rows = await self.repository.list_team_participations(event_id)
        return [
            TeamParticipationResponse(
                id=participation.id,
                event_id=participation.event_id,
                team_id=participation.team_id,
                team_name=team.name,
                member_count=member_count,
                notes=participation.notes,
                created_at=participation.created_at,
            )
            for participation, team, member_count in rows
        ]

    async def register_individual(
        self,
        *,
        event_id: UUID,
        user_id: UUID,
        notes: str | None = None,
    ) -> FishingParticipant:
        try:
            event = await self._lock_event(event_id)
            if event.format != EventFormat.SOLO:
                raise WrongFormat("This event only accepts team registrations.")
            if await self.repository.get_participant(event_id, user_id) is not None:
                raise AlreadyRegistered("You are already registered for this event.")
            if await self.repository.find_registered_team_members(event_id, [user_id]):
                raise MemberConflict(
                    "You are already registered for this event as a team member."
                )
            if event.max_participants is not None:
                count = await self.repository.count_participants(event_id)
                if count >= event.max_participants:
                    raise CapacityReached("The maximum number of participants has been reached.")

            user = await self.repository.get_user(user_id)
            if user is None:
                raise UserNotFound(f"User not found: {user_id}")
            participant = FishingParticipant(
                event_id=event_id,
                user_id=user_id,
                name=user.name or user.email or UNKNOWN_PARTICIPANT_NAME,
                contact=user.email or "",
                notes=notes,
            )
            await self.repository.add(participant)
            await self.repository.commit()
        except IntegrityError as exc:
            await self.repository.rollback()
            raise AlreadyRegistered("You are already registered for this event.") from exc
        except Exception:
            await self.repository.rollback()
            raise

        await self.repository.refresh(participant)
        logger.info(
            "participant_registered",
            extra={"event_id": str(event_id), "user_id": str(user_id)},
        )
        return participant

    async def unregister_individual(self, *, event_id: UUID, user_id: UUID) -> None:
        await self._require_event(event_id)
        participant = await self.repository.get_participant(event_id, user_id)
        if participant is None:
            raise NotRegistered("You are not registered for this event.")
        await self.repository.delete_participant(participant.id)
        await self.repository.commit()
        logger.info(
            "participant_unregistered",
            extra={"event_id": str(event_id), "user_id": str(user_id)},
        )

    async def register_team(
        self,
        *,
        event_id: UUID,
        team_id: UUID,
        user_id: UUID,
        notes: str | None = None,
    ) -> TeamParticipationResponse:
        try:
            event = await self._lock_event(event_id)
            required_size = event.format.team_size
            if required_size is None:
                raise WrongFormat("This event only accepts individual registrations.")

            team = await self.repository.get_team(team_id)
            if team is None:
                raise TeamNotFound(team_id)
            member_ids = await self.repository.get_team_member_ids(team_id)
            if user_id not in member_ids:
                raise NotTeamMember("You are not a member of this team.")
            if len(member_ids) != required_size:
                raise TeamSizeMismatch(len(member_ids), required_size)
            if await self.repository.get_team_participation(event_id, team_id) is not None:
                raise AlreadyRegistered("This team is already registered for this event.")
            if await self.repository.list_individuals_among(event_id, member_ids):
                raise MemberConflict(
                    "Some team members are already registered individually for this event."
                )
            if await self.repository.find_registered_team_members(
                event_id, member_ids, exclude_team_id=team_id
            ):
                raise MemberConflict(
                    "Some team members are already registered for this event in another team."
                )
            if event.max_participants is not None:
                count = await self.repository.count_team_participations(event_id)
                if count >= event.max_participants:
                    raise CapacityReached("The maximum number of teams has been reached.")

            participation = TeamParticipation(event_id=event_id, team_id=team_id, notes=notes)
            await self.repository.add(participation)
            await self.repository.commit()
        except IntegrityError as exc:
            await self.repository.rollback()
            raise AlreadyRegistered("This team is already registered for this event.") from exc
        except Exception:
            await self.repository.rollback()
            raise

        await self.repository.refresh(participation)
        logger.info(
            "team_registered",
            extra={
                "event_id": str(event_id),
                "team_id": str(team_id),
                "user_id": str(user_id),
            },
        )
        return TeamParticipationResponse(
            id=participation.id,
            event_id=participation.event_id,
            team_id=participation.team_id,
            team_name=team.name,
            member_count=len(member_ids),
            notes=participation.notes,
            created_at=participation.created_at,
        )

    async def unregister_team(self, *, event_id: UUID, team_id: UUID, user_id: UUID) -> None:
        event = await self._require_event(event_id)
        member_ids = await self.repository.get_team_member_ids(team_id)
        if user_id not in member_ids and event.owner_id != user_id:
            raise NotAuthorized("Only team members or the event owner can unregister a team.")
        participation = await self.repository.get_team_participation(event_id, team_id)
        if participation is None:
            raise NotRegistered("This team is not registered for this event.")
        await self.repository.delete_team_participation(participation.id)
        await self.repository.commit()
        logger.info(
            "team_unregistered",
            extra={
                "event_id": str(event_id),
                "team_id": str(team_id),
                "user_id": str(user_id),
            },
        )

    async def _require_event(self, event_id: UUID) -> FishingEvent:
        event = await self.repository.get_event(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event

    async def _lock_event(self, event_id: UUID) -> FishingEvent:
        event = await self.repository.lock_event(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event
