from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from fishing_api.db.enums import ParticipantType
from fishing_api.db.models import (
    EventResult,
    FishingEvent,
    Team,
    TeamRatingHistory,
    User,
    UserRatingHistory,
)


class ResultsRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_event(self, event_id: UUID) -> FishingEvent | None:
        return await self.session.get(FishingEvent, event_id)

    async def list_results(self, event_id: UUID) -> list[EventResult]:
        stmt = (
            select(EventResult)
            .where(EventResult.event_id == event_id)
            .order_by(col(EventResult.place), col(EventResult.created_at))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_results(self, event_id: UUID) -> None:
        await self.session.execute(
            delete(EventResult).where(col(EventResult.event_id) == event_id)
        )

    async def get_subject(
        self,
        participant_type: ParticipantType,
        subject_id: UUID,
    ) -> User | Team | None:
        model = User if participant_type == ParticipantType.USER else Team
        return await self.session.get(model, subject_id)

    async def lock_subject(
        self,
        participant_type: ParticipantType,
        subject_id: UUID,
    ) -> User | Team | None:
        model = User if participant_type == ParticipantType.USER else Team
        stmt = select(model).where(model.id == subject_id).with_for_update()
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def add(
        self,
        row: EventResult | UserRatingHistory | TeamRatingHistory | User | Team,
    ) -> None:
        self.session.add(row)
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
