from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from fishing_api.config.settings import Settings
from fishing_api.deps.common import SESSION_DEP, SETTINGS_DEP
from fishing_api.modules.teams.repository import TeamsRepository
from fishing_api.modules.teams.service import TeamsService


def get_teams_service_dep(
    session: AsyncSession = SESSION_DEP,
    settings: Settings = SETTINGS_DEP,
) -> TeamsService:
    return TeamsService(repository=TeamsRepository(session=session), settings=settings)
