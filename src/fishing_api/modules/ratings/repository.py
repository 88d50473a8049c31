from __future__ import annotations

from uuid import UUID

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from fishing_api.db.enums import RatingSort
from fishing_api.db.models import Team, TeamMember, TeamRatingHistory, User, UserRatingHistory


class RatingsRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_users(
        self,
        *,
        offset: int,
        limit: int,
        sort: RatingSort,
    ) -> tuple[int, list[User]]:
        total_result = await self.session.execute(select(func.count()).select_from(User))
        stmt = select(User)
        if sort == RatingSort.RATING:
            stmt = stmt.order_by(col(User.rating).desc(), col(User.created_at).desc())
        else:
            stmt = stmt.order_by(col(User.created_at).desc())
        result = await self.session.execute(stmt.offset(offset).limit(limit))
        return int(total_result.scalar_one()), list(result.scalars().all())

    async def list_teams(
        self,
        *,
        offset: int,
        limit: int,
        sort: RatingSort,
    ) -> tuple[int, list[tuple[Team, int]]]:
        total_result = await self.session.execute(select(func.count()).select_from(Team))
        member_counts = (
            select(TeamMember.team_id, func.count().label("member_count"))
            .group_by(col(TeamMember.team_id))
            .subquery()
        )
        stmt = select(Team, member_counts.c.member_count).outerjoin(
            member_counts, member_counts.c.team_id == col(Team.id)
        )
        if sort == RatingSort.RATING:
            stmt = stmt.order_by(col(Team.rating).desc(), col(Team.created_at).desc())
        else:
            stmt = stmt.order_by(col(Team.created_at).desc())
        result = await self.session.execute(stmt.offset(offset).limit(limit))
        rows = [(row[0], int(row[1] or 0)) for row in result.all()]
        return int(total_result.scalar_one()), rows

    async def get_user(self, user_id: UUID) -> User | None:
        return await self.session.get(User, user_id)

    async def get_team(self, team_id: UUID) -> Team | None:
        return await self.session.get(Team, team_id)

    async def list_user_history(
        self,
        user_id: UUID,
        *,
        limit: int,
        offset: int,
    ) -> tuple[int, list[UserRatingHistory]]:
        total_result = await self.session.execute(
            select(func.count())
            .select_from(UserRatingHistory)
            .where(UserRatingHistory.user_id == user_id)
        )
        result = await self.session.execute(
            select(UserRatingHistory)
            .where(UserRatingHistory.user_id == user_id)
            .order_by(col(UserRatingHistory.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        return int(total_result.scalar_one()), list(result.scalars().all())

    async def list_team_history(
        self,
        team_id: UUID,
        *,
        limit: int,
        offset: int,
    ) -> tuple[int, list[TeamRatingHistory]]:
        total_result = await self.session.execute(
            select(func.count())
            .select_from(TeamRatingHistory)
            .where(TeamRatingHistory.team_id == team_id)
        )
        result = await self.session.execute(
            select(TeamRatingHistory)
            .where(TeamRatingHistory.team_id == team_id)
            .order_by(col(TeamRatingHistory.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        return int(total_result.scalar_one()), list(result.scalars().all())

    async def user_history_totals(self) -> dict[UUID, int]:
        result = await self.session.execute(
            select(UserRatingHistory.user_id, func.sum(UserRatingHistory.change)).group_by(
                col(UserRatingHistory.user_id)
            )
        )
        return {row[0]: int(row[1] or 0) for row in result.all()}

    async def team_history_totals(self) -> dict[UUID, int]:
        result = await self.session.execute(
            select(TeamRatingHistory.team_id, func.sum(TeamRatingHistory.change)).group_by(
                col(TeamRatingHistory.team_id)
            )
        )
        return {row[0]: int(row[1] or 0) for row in result.all()}

    async def all_users(self) -> list[User]:
        result = await self.session.execute(select(User).with_for_update())
        return list(result.scalars().all())

    async def all_teams(self) -> list[Team]:
        result = await self.session.execute(select(Team).with_for_update())
        return list(result.scalars().all())

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
