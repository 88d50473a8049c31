from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from fishing_api.deps.common import SESSION_DEP
from fishing_api.modules.participation.repository import ParticipationRepository
from fishing_api.modules.participation.service import ParticipationService


def get_participation_service_dep(session: AsyncSession = SESSION_DEP) -> ParticipationService:
    return ParticipationService(repository=ParticipationRepository(session=session))
