from __future__ import annotations

import logging
from uuid import UUID

from fishing_api.common.datetime_utils import utcnow
from fishing_api.common.errors import TeamNotFound, UserNotFound
from fishing_api.common.pagination import build_page, clamp_page, page_offset
from fishing_api.common.schemas import NumberedPage
from fishing_api.config.settings import Settings
from fishing_api.db.enums import RatingSort
from fishing_api.db.models import TeamRatingHistory, UserRatingHistory
from fishing_api.modules.ratings.repository import RatingsRepository
from fishing_api.modules.ratings.schemas import (
    RatingRebuildResponse,
    TeamRatingResponse,
    UserRatingResponse,
)

logger = logging.getLogger(__name__)


class RatingsService:
    def __init__(self, repository: RatingsRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def list_user_ratings(
        self,
        *,
        page: int,
        limit: int,
        sort: RatingSort = RatingSort.RECENT,
    ) -> NumberedPage[UserRatingResponse]:
        page, limit = clamp_page(page, limit)
        total, users = await self.repository.list_users(
            offset=page_offset(page, limit),
            limit=limit,
            sort=sort,
        )
        return build_page(
            items=[UserRatingResponse.model_validate(user) for user in users],
            total=total,
            page=page,
            limit=limit,
        )

    async def list_team_ratings(
        self,
        *,
        page: int,
        limit: int,
        sort: RatingSort = RatingSort.RECENT,
    ) -> NumberedPage[TeamRatingResponse]:
        page, limit = clamp_page(page, limit)
        total, rows = await self.repository.list_teams(
            offset=page_offset(page, limit),
            limit=limit,
            sort=sort,
        )
        return build_page(
            items=[
                TeamRatingResponse(
                    id=team.id,
                    name=team.name,
                    logo=team.logo,
                    rating=team.rating,
                    member_count=member_count,
                    created_at=team.created_at,
                )
                for team, member_count in rows
            ],
            total=total,
            page=page,
            limit=limit,
        )

    async def get_user_history(
        self,
        user_id: UUID,
        *,
        limit: int,
        offset: int,
    ) -> tuple[int, list[UserRatingHistory]]:
        if await self.repository.get_user(user_id) is None:
            raise UserNotFound(f"User not found: {user_id}")
        return await self.repository.list_user_history(user_id, limit=limit, offset=offset)

    async def get_team_history(
        self,
        team_id: UUID,
        *,
        limit: int,
        offset: int,
    ) -> tuple[int, list[TeamRatingHistory]]:
        if await self.repository.get_team(team_id) is None:
            raise TeamNotFound(team_id)
        return await self.repository.list_team_history(team_id, limit=limit, offset=offset)

    async def rebuild_ratings(self) -> RatingRebuildResponse:
        """Recompute cached ratings by replaying the history ledger.

        Each rating becomes the default rating plus the sum of its recorded
        changes. Returns how many users and teams had a stale cached value.
        """
        baseline = self.settings.rating_default
        try:
            user_totals = await self.repository.user_history_totals()
            team_totals = await self.repository.team_history_totals()
            now = utcnow()

            users_updated = 0
            for user in await self.repository.all_users():
                expected = baseline + user_totals.get(user.id, 0)
                if user.rating != expected:
                    user.rating = expected
                    user.updated_at = now
                    users_updated += 1

            teams_updated = 0
            for team in await self.repository.all_teams():
                expected = baseline + team_totals.get(team.id, 0)
                if team.rating != expected:
                    team.rating = expected
                    team.updated_at = now
                    teams_updated += 1

            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            "ratings_rebuilt",
            extra={"users_updated": users_updated, "teams_updated": teams_updated},
        )
        return RatingRebuildResponse(users_updated=users_updated, teams_updated=teams_updated)
