from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from fishing_api.config.settings import Settings
from fishing_api.deps.common import SESSION_DEP, SETTINGS_DEP
from fishing_api.modules.results.repository import ResultsRepository
from fishing_api.modules.results.service import ResultsService


def get_results_service_dep(
    session: AsyncSession = SESSION_DEP,
    settings: Settings = SETTINGS_DEP,
) -> ResultsService:
    return ResultsService(repository=ResultsRepository(session=session), settings=settings)
