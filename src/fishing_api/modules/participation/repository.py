from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from fishing_api.db.models import (
    FishingEvent,
    FishingParticipant,
    Team,
    TeamMember,
    TeamParticipation,
    User,
)


class ParticipationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_event(self, event_id: UUID) -> FishingEvent | None:
        return await self.session.get(FishingEvent, event_id)

    async def lock_event(self, event_id: UUID) -> FishingEvent | None:
        """Load the event with a row lock held until commit/rollback.

        Serializes concurrent registrations for the same event so the
        capacity check and the insert see the same count.
        """
        stmt = select(FishingEvent).where(FishingEvent.id == event_id).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_user(self, user_id: UUID) -> User | None:
        return await self.session.get(User, user_id)

    async def get_team(self, team_id: UUID) -> Team | None:
        return await self.session.get(Team, team_id)

    async def get_participant(self, event_id: UUID, user_id: UUID) -> FishingParticipant | None:
        stmt = select(FishingParticipant).where(
            FishingParticipant.event_id == event_id,
            FishingParticipant.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_participants(self, event_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(FishingParticipant)
            .where(FishingParticipant.event_id == event_id)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_participants(self, event_id: UUID) -> list[FishingParticipant]:
        stmt = (
            select(FishingParticipant)
            .where(FishingParticipant.event_id == event_id)
            .order_by(col(FishingParticipant.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_individuals_among(
        self, event_id: UUID, user_ids: list[UUID]
    ) -> list[FishingParticipant]:
        if not user_ids:
            return []
        stmt = select(FishingParticipant).where(
            FishingParticipant.event_id == event_id,
            col(FishingParticipant.user_id).in_(user_ids),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_team_member_ids(self, team_id: UUID) -> list[UUID]:
        stmt = select(TeamMember.user_id).where(TeamMember.team_id == team_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_team_participation(
        self, event_id: UUID, team_id: UUID
    ) -> TeamParticipation | None:
        stmt = select(TeamParticipation).where(
            TeamParticipation.event_id == event_id,
            TeamParticipation.team_id == team_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_team_participations(self, event_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(TeamParticipation)
            .where(TeamParticipation.event_id == event_id)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def list_team_participations(
        self, event_id: UUID
    ) -> list[tuple[TeamParticipation, Team, int]]:
        member_counts = (
            select(TeamMember.team_id, func.count().label("member_count"))
            .group_by(col(TeamMember.team_id))
            .subquery()
        )
        stmt = (
            select(TeamParticipation, Team, member_counts.c.member_count)
            .join(Team, col(Team.id) == col(TeamParticipation.team_id))
            .outerjoin(member_counts, member_counts.c.team_id == col(Team.id))
            .where(TeamParticipation.event_id == event_id)
            .order_by(col(TeamParticipation.created_at))
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1], int(row[2] or 0)) for row in result.all()]

    async def find_registered_team_members(
        self,
        event_id: UUID,
        user_ids: list[UUID],
        *,
        exclude_team_id: UUID | None = None,
    ) -> list[TeamMember]:
        """Memberships of ``user_ids`` in teams already registered for the event."""
        if not user_ids:
            return []
        stmt = (
            select(TeamMember)
            .join(TeamParticipation, col(TeamParticipation.team_id) == col(TeamMember.team_id))
            .where(TeamParticipation.event_id == event_id)
            .where(col(TeamMember.user_id).in_(user_ids))
        )
        if exclude_team_id is not None:
            stmt = stmt.where(col(TeamMember.team_id) != exclude_team_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add(self, row: FishingParticipant | TeamParticipation) -> None:
        self.session.add(row)
        await self.session.flush()

    async def delete_participant(self, participant_id: UUID) -> None:
        await self.session.execute(
            delete(FishingParticipant).where(col(FishingParticipant.id) == participant_id)
        )

    async def delete_team_participation(self, participation_id: UUID) -> None:
        await self.session.execute(
            delete(TeamParticipation).where(col(TeamParticipation.id) == participation_id)
        )

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def refresh(self, row: object) -> None:
        await self.session.refresh(row)
