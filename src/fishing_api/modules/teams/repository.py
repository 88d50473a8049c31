from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from fishing_api.db.models import (
    FishingEvent,
    Team,
    TeamMember,
    TeamParticipation,
    TeamRatingHistory,
    User,
)


class TeamsRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_team(self, team_id: UUID) -> Team | None:
        return await self.session.get(Team, team_id)

    async def list_teams_for_user(self, user_id: UUID) -> list[Team]:
        member_of = select(TeamMember.team_id).where(TeamMember.user_id == user_id)
        stmt = (
            select(Team)
            .where(or_(col(Team.owner_id) == user_id, col(Team.id).in_(member_of)))
            .order_by(col(Team.created_at).desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_members(self, team_id: UUID) -> list[tuple[TeamMember, User]]:
        stmt = (
            select(TeamMember, User)
            .join(User, col(User.id) == col(TeamMember.user_id))
            .where(TeamMember.team_id == team_id)
            .order_by(col(TeamMember.joined_at))
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def get_member(self, team_id: UUID, member_id: UUID) -> TeamMember | None:
        stmt = select(TeamMember).where(
            TeamMember.team_id == team_id,
            TeamMember.id == member_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_membership(self, team_id: UUID, user_id: UUID) -> TeamMember | None:
        stmt = select(TeamMember).where(
            TeamMember.team_id == team_id,
            TeamMember.user_id == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_members(self, team_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(TeamMember).where(TeamMember.team_id == team_id)
        )
        return int(result.scalar_one())

    async def get_users(self, user_ids: list[UUID]) -> list[User]:
        if not user_ids:
            return []
        result = await self.session.execute(select(User).where(col(User.id).in_(user_ids)))
        return list(result.scalars().all())

    async def get_user_by_email(self, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def has_active_participation(self, team_id: UUID, *, now: datetime) -> bool:
        """True when the team is registered for an event that has not finished."""
        finishes_at = func.coalesce(FishingEvent.end_date, FishingEvent.start_date)
        stmt = (
            select(TeamParticipation.id)
            .join(FishingEvent, col(FishingEvent.id) == col(TeamParticipation.event_id))
            .where(TeamParticipation.team_id == team_id)
            .where(finishes_at > now)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def add(self, row: Team | TeamMember) -> None:
        self.session.add(row)
        await self.session.flush()

    async def delete_member(self, member_id: UUID) -> None:
        await self.session.execute(delete(TeamMember).where(col(TeamMember.id) == member_id))

    async def delete_team_cascade(self, team_id: UUID) -> None:
        for model in (TeamParticipation, TeamMember, TeamRatingHistory):
            await self.session.execute(delete(model).where(col(model.team_id) == team_id))
        await self.session.execute(delete(Team).where(col(Team.id) == team_id))

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def refresh(self, row: object) -> None:
        await self.session.refresh(row)
