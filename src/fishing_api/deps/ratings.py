from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from fishing_api.config.settings import Settings
from fishing_api.deps.common import SESSION_DEP, SETTINGS_DEP
from fishing_api.modules.ratings.repository import RatingsRepository
from fishing_api.modules.ratings.service import RatingsService


def get_ratings_service_dep(
    session: AsyncSession = SESSION_DEP,
    settings: Settings = SETTINGS_DEP,
) -> RatingsService:
    return RatingsService(repository=RatingsRepository(session=session), settings=settings)
