from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from fishing_api.db.models import (
    EventResult,
    FishCatch,
    FishingEvent,
    FishingParticipant,
    TeamMember,
    TeamParticipation,
    User,
)


class EventsRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_events(self) -> list[FishingEvent]:
        stmt = select(FishingEvent).order_by(col(FishingEvent.start_date).desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_event(self, event_id: UUID) -> FishingEvent | None:
        return await self.session.get(FishingEvent, event_id)

    async def get_user(self, user_id: UUID) -> User | None:
        return await self.session.get(User, user_id)

    async def save_event(self, event: FishingEvent) -> FishingEvent:
        self.session.add(event)
        await self.session.commit()
        await self.session.refresh(event)
        return event

    async def count_registrations(self, event_id: UUID) -> int:
        individuals = await self.session.execute(
            select(func.count())
            .select_from(FishingParticipant)
            .where(FishingParticipant.event_id == event_id)
        )
        teams = await self.session.execute(
            select(func.count())
            .select_from(TeamParticipation)
            .where(TeamParticipation.event_id == event_id)
        )
        return int(individuals.scalar_one()) + int(teams.scalar_one())

    async def list_catches(self, event_id: UUID) -> list[FishCatch]:
        stmt = (
            select(FishCatch)
            .where(FishCatch.event_id == event_id)
            .order_by(col(FishCatch.caught_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def is_registered(self, event_id: UUID, user_id: UUID) -> bool:
        individual = await self.session.execute(
            select(FishingParticipant.id).where(
                FishingParticipant.event_id == event_id,
                FishingParticipant.user_id == user_id,
            )
        )
        if individual.first() is not None:
            return True
        via_team = await self.session.execute(
            select(TeamMember.id)
            .join(TeamParticipation, col(TeamParticipation.team_id) == col(TeamMember.team_id))
            .where(TeamParticipation.event_id == event_id)
            .where(TeamMember.user_id == user_id)
        )
        return via_team.first() is not None

    async def create_catch(self, fish_catch: FishCatch) -> FishCatch:
        self.session.add(fish_catch)
        await self.session.commit()
        await self.session.refresh(fish_catch)
        return fish_catch

    async def delete_event_cascade(self, event_id: UUID) -> None:
        """Delete the event and every row that references it, in one transaction.

        Rating history is left in place; its event_id is not a foreign key.
        """
        try:
            for model in (EventResult, FishCatch, FishingParticipant, TeamParticipation):
                await self.session.execute(delete(model).where(col(model.event_id) == event_id))
            await self.session.execute(
                delete(FishingEvent).where(col(FishingEvent.id) == event_id)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
