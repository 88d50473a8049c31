from __future__ import annotations

import logging
from datetime import datetime
from typing import NamedTuple
from uuid import UUID

from pydantic import ValidationError

from fishing_api.common.datetime_utils import utcnow
from fishing_api.common.errors import (
    EventNotFound,
    InvalidResultsFormat,
    NotAuthorized,
    ParticipantNotFound,
)
from fishing_api.config.settings import Settings
from fishing_api.db.enums import ParticipantType
from fishing_api.db.models import EventResult, Team, TeamRatingHistory, User, UserRatingHistory
from fishing_api.modules.results.repository import ResultsRepository
from fishing_api.modules.results.schemas import (
    EventResultResponse,
    ResultEntryRequest,
    ResultsSubmitRequest,
)
from fishing_api.modules.results.strategies import RatedPlacement, compute_rating_changes

logger = logging.getLogger(__name__)


class ResultEntry(NamedTuple):
    participant_type: ParticipantType
    participant_id: UUID
    place: int
    score: float


def rating_reason(place: int, event_title: str) -> str:
    return f'Place {place} in "{event_title}"'


def subject_name(subject: User | Team) -> str | None:
    if isinstance(subject, User):
        return subject.name or subject.email
    return subject.name


class ResultsService:
    def __init__(self, repository: ResultsRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def get_results(self, event_id: UUID) -> list[EventResultResponse]:
        if await self.repository.get_event(event_id) is None:
            raise EventNotFound(event_id)
        rows = await self.repository.list_results(event_id)
        responses: list[EventResultResponse] = []
        for row in rows:
            subject = await self.repository.get_subject(row.participant_type, row.participant_id)
            responses.append(
                self._to_response(row, subject_name(subject) if subject is not None else None)
            )
        return responses

    async def submit_results(
        self,
        event_id: UUID,
        payload: ResultsSubmitRequest,
        *,
        user_id: UUID,
    ) -> list[EventResultResponse]:
        """Replace the event's results and apply rating changes atomically.

        Any failure after the old rows are deleted rolls the whole submission
        back, leaving previous results and ratings untouched.
        """
        event = await self.repository.get_event(event_id)
        if event is None:
            raise EventNotFound(event_id)
        if event.owner_id != user_id:
            raise NotAuthorized("Only the event owner can submit results.")
        entries = self.validate_entries(payload.results)
        event_title = event.title

        try:
            previous = {
                (row.participant_type, row.participant_id): (
                    ResultEntry(row.participant_type, row.participant_id, row.place, row.score),
                    row.rating_change,
                )
                for row in await self.repository.list_results(event_id)
            }
            await self.repository.delete_results(event_id)

            subjects: list[User | Team] = []
            for entry in entries:
                subject = await self.repository.lock_subject(
                    entry.participant_type, entry.participant_id
                )
                if subject is None:
                    raise ParticipantNotFound(
                        f"{entry.participant_type.value.capitalize()} not found: "
                        f"{entry.participant_id}"
                    )
                subjects.append(subject)

            now = utcnow()
            revert = self.settings.results_resubmit_policy == "revert"
            if revert:
                await self._withdraw_dropped(
                    previous, entries, event_id=event_id, event_title=event_title, now=now
                )

            base_ratings: list[int] = []
            for entry, subject in zip(entries, subjects):
                current = subject.rating
                if revert and (entry.participant_type, entry.participant_id) in previous:
                    current -= previous[(entry.participant_type, entry.participant_id)][1]
                base_ratings.append(current)

            changes = compute_rating_changes(
                [
                    RatedPlacement(rating=base, place=entry.place)
                    for entry, base in zip(entries, base_ratings)
                ],
                strategy=self.settings.rating_strategy,
                k_factor=self.settings.rating_elo_k_factor,
            )

            created: list[tuple[EventResult, User | Team]] = []
            for entry, subject, base, change in zip(entries, subjects, base_ratings, changes):
                old_rating = subject.rating
                new_rating = base + change
                result_row = EventResult(
                    event_id=event_id,
                    participant_type=entry.participant_type,
                    participant_id=entry.participant_id,
                    place=entry.place,
                    score=entry.score,
                    rating_change=change,
                    created_at=now,
                )
                await self.repository.add(result_row)
                subject.rating = new_rating
                subject.updated_at = now
                await self.repository.add(subject)
                await self.repository.add(
                    self._history_row(
                        entry,
                        event_id=event_id,
                        old_rating=old_rating,
                        new_rating=new_rating,
                        reason=rating_reason(entry.place, event_title),
                        created_at=now,
                    )
                )
                created.append((result_row, subject))

            await self.repository.commit()
        except Exception:
            await self.repository.rollback()
            raise

        logger.info(
            "results_submitted",
            extra={
                "event_id": str(event_id),
                "user_id": str(user_id),
                "result_count": len(created),
                "rating_strategy": self.settings.rating_strategy,
            },
        )
        created.sort(key=lambda item: item[0].place)
        return [self._to_response(row, subject_name(subject)) for row, subject in created]

    async def _withdraw_dropped(
        self,
        previous: dict[tuple[ParticipantType, UUID], tuple[ResultEntry, int]],
        entries: list[ResultEntry],
        *,
        event_id: UUID,
        event_title: str,
        now: datetime,
    ) -> None:
        """Take back the change of every earlier entry missing from the new table."""
        kept = {(entry.participant_type, entry.participant_id) for entry in entries}
        for key, (entry, change) in previous.items():
            if key in kept or change == 0:
                continue
            subject = await self.repository.lock_subject(*key)
            if subject is None:
                continue
            old_rating = subject.rating
            subject.rating = old_rating - change
            subject.updated_at = now
            await self.repository.add(subject)
            await self.repository.add(
                self._history_row(
                    entry,
                    event_id=event_id,
                    old_rating=old_rating,
                    new_rating=subject.rating,
                    reason=f'Result withdrawn from "{event_title}"',
                    created_at=now,
                )
            )

    @staticmethod
    def validate_entries(rows: object) -> list[ResultEntry]:
        if not isinstance(rows, list):
            raise InvalidResultsFormat("Results must be a list of entries.")
        if not rows:
            raise InvalidResultsFormat("Results must contain at least one entry.")
        entries: list[ResultEntry] = []
        seen_participants: set[tuple[ParticipantType, UUID]] = set()
        seen_places: set[int] = set()
        for raw in rows:
            try:
                row = ResultEntryRequest.model_validate(raw)
            except ValidationError as exc:
                first = exc.errors()[0]
                field = ".".join(str(part) for part in first["loc"]) or "entry"
                raise InvalidResultsFormat(
                    f"Invalid result entry ({field}): {first['msg']}."
                ) from exc
            try:
                participant_type = ParticipantType(row.participant_type)
            except ValueError as exc:
                raise InvalidResultsFormat(
                    f"Unknown participant type '{row.participant_type}'."
                ) from exc
            if row.place < 1:
                raise InvalidResultsFormat("Places must be positive integers.")
            key = (participant_type, row.participant_id)
            if key in seen_participants:
                raise InvalidResultsFormat(
                    f"Participant {row.participant_id} appears more than once."
                )
            if row.place in seen_places:
                raise InvalidResultsFormat(f"Place {row.place} is assigned more than once.")
            seen_participants.add(key)
            seen_places.add(row.place)
            entries.append(
                ResultEntry(
                    participant_type=participant_type,
                    participant_id=row.participant_id,
                    place=row.place,
                    score=row.score,
                )
            )
        return entries

    @staticmethod
    def _history_row(
        entry: ResultEntry,
        *,
        event_id: UUID,
        old_rating: int,
        new_rating: int,
        reason: str,
        created_at: datetime,
    ) -> UserRatingHistory | TeamRatingHistory:
        if entry.participant_type == ParticipantType.USER:
            return UserRatingHistory(
                user_id=entry.participant_id,
                event_id=event_id,
                old_rating=old_rating,
                new_rating=new_rating,
                change=new_rating - old_rating,
                reason=reason,
                created_at=created_at,
            )
        return TeamRatingHistory(
            team_id=entry.participant_id,
            event_id=event_id,
            old_rating=old_rating,
            new_rating=new_rating,
            change=new_rating - old_rating,
            reason=reason,
            created_at=created_at,
        )

    @staticmethod
    def _to_response(row: EventResult, participant_name: str | None) -> EventResultResponse:
        return EventResultResponse(
            id=row.id,
            event_id=row.event_id,
            participant_type=row.participant_type,
            participant_id=row.participant_id,
            participant_name=participant_name,
            place=row.place,
            score=row.score,
            rating_change=row.rating_change,
            created_at=row.created_at,
        )
