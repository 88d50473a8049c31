from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from fishing_api.deps.common import SESSION_DEP
from fishing_api.modules.events.repository import EventsRepository
from fishing_api.modules.events.service import EventsService
from fishing_api.modules.participation.repository import ParticipationRepository
from fishing_api.modules.participation.service import ParticipationService


def get_events_service_dep(session: AsyncSession = SESSION_DEP) -> EventsService:
    return EventsService(
        repository=EventsRepository(session=session),
        participation_service=ParticipationService(
            repository=ParticipationRepository(session=session)
        ),
    )
