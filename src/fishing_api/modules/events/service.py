from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from fishing_api.common.datetime_utils import to_naive_utc, to_naive_utc_or_none, utcnow
from fishing_api.common.errors import (
    EventNotFound,
    FormatLocked,
    InvalidEventFormat,
    InvalidRequestError,
    NotAuthorized,
)
from fishing_api.db.enums import EventFormat
from fishing_api.db.models import FishCatch, FishingEvent
from fishing_api.modules.events.repository import EventsRepository
from fishing_api.modules.events.schemas import (
    CatchCreateRequest,
    CatchResponse,
    EventCreateRequest,
    EventDetailResponse,
    EventResponse,
    EventUpdateRequest,
    OwnerSummary,
)
from fishing_api.modules.participation.schemas import ParticipantResponse
from fishing_api.modules.participation.service import ParticipationService

logger = logging.getLogger(__name__)


def parse_event_format(value: str) -> EventFormat:
    try:
        return EventFormat(value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in EventFormat)
        raise InvalidEventFormat(
            f"Invalid event format '{value}'. Expected one of: {allowed}."
        ) from exc


class EventsService:
    def __init__(
        self,
        repository: EventsRepository,
        participation_service: ParticipationService,
    ) -> None:
        self.repository = repository
        self.participation_service = participation_service

    async def list_events(self) -> list[FishingEvent]:
        return await self.repository.list_events()

    async def get_event(self, event_id: UUID) -> FishingEvent:
        event = await self.repository.get_event(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event

    async def get_event_detail(self, event_id: UUID) -> EventDetailResponse:
        event = await self.get_event(event_id)
        owner = await self.repository.get_user(event.owner_id)
        participants = await self.participation_service.list_participants(event_id)
        team_participations = await self.participation_service.list_team_participations(event_id)
        catches = await self.repository.list_catches(event_id)
        return EventDetailResponse(
            **EventResponse.model_validate(event).model_dump(),
            owner=OwnerSummary.model_validate(owner) if owner is not None else None,
            participants=[ParticipantResponse.model_validate(row) for row in participants],
            team_participations=team_participations,
            catches=[CatchResponse.model_validate(row) for row in catches],
        )

    async def create_event(self, payload: EventCreateRequest, *, owner_id: UUID) -> FishingEvent:
        event_format = parse_event_format(payload.format)
        start_date = to_naive_utc(payload.start_date)
        end_date = to_naive_utc_or_none(payload.end_date)
        self._check_dates(start_date, end_date)
        now = utcnow()
        event = FishingEvent(
            title=payload.title,
            description=payload.description,
            latitude=payload.latitude,
            longitude=payload.longitude,
            start_date=start_date,
            end_date=end_date,
            fish_types=payload.fish_types,
            weather=payload.weather,
            format=event_format,
            max_participants=payload.max_participants,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        event = await self.repository.save_event(event)
        logger.info(
            "event_created",
            extra={
                "event_id": str(event.id),
                "user_id": str(owner_id),
                "format": event.format.value,
            },
        )
        return event

    async def update_event(
        self,
        event_id: UUID,
        payload: EventUpdateRequest,
        *,
        user_id: UUID,
    ) -> FishingEvent:
        event = await self._get_owned_event(event_id, user_id)
        changes = payload.model_dump(exclude_unset=True)

        if "format" in changes:
            if changes["format"] is None:
                raise InvalidEventFormat("Event format cannot be empty.")
            new_format = parse_event_format(changes.pop("format"))
            if new_format != event.format:
                if await self.repository.count_registrations(event_id) > 0:
                    raise FormatLocked(
                        "The event format cannot change once participants have registered."
                    )
                event.format = new_format

        for required in ("title", "latitude", "longitude", "start_date"):
            if required in changes and changes[required] is None:
                raise InvalidRequestError(f"Field '{required}' cannot be empty.")
        if "start_date" in changes:
            changes["start_date"] = to_naive_utc(changes["start_date"])
        if "end_date" in changes:
            changes["end_date"] = to_naive_utc_or_none(changes["end_date"])
        self._check_dates(
            changes.get("start_date", event.start_date),
            changes.get("end_date", event.end_date),
        )

        for field, value in changes.items():
            setattr(event, field, value)
        event.updated_at = utcnow()
        event = await self.repository.save_event(event)
        logger.info("event_updated", extra={"event_id": str(event_id), "user_id": str(user_id)})
        return event

    async def delete_event(self, event_id: UUID, *, user_id: UUID) -> None:
        await self._get_owned_event(event_id, user_id)
        await self.repository.delete_event_cascade(event_id)
        logger.info("event_deleted", extra={"event_id": str(event_id), "user_id": str(user_id)})

    async def record_catch(
        self,
        event_id: UUID,
        payload: CatchCreateRequest,
        *,
        user_id: UUID,
    ) -> FishCatch:
        event = await self.get_event(event_id)
        if event.owner_id != user_id and not await self.repository.is_registered(event_id, user_id):
            raise NotAuthorized("Only registered participants can record catches.")
        fish_catch = FishCatch(
            event_id=event_id,
            user_id=user_id,
            species=payload.species,
            weight_kg=payload.weight_kg,
            length_cm=payload.length_cm,
            notes=payload.notes,
            caught_at=to_naive_utc(payload.caught_at) if payload.caught_at else utcnow(),
        )
        return await self.repository.create_catch(fish_catch)

    async def _get_owned_event(self, event_id: UUID, user_id: UUID) -> FishingEvent:
        # Non-owners see the same 404 as a missing event.
        event = await self.repository.get_event(event_id)
        if event is None or event.owner_id != user_id:
            raise EventNotFound(event_id)
        return event

    @staticmethod
    def _check_dates(start_date: datetime, end_date: datetime | None) -> None:
        if end_date is not None and end_date < start_date:
            raise InvalidRequestError("End date must not be earlier than start date.")
