"""Typed domain errors raised by the service layer.

Every error subclasses the builtin that services in this codebase already use
for the same situation (``LookupError`` for missing rows, ``PermissionError``
for ownership/role checks, ``ValueError`` for rejected input), so callers that
only know the builtins keep working. ``status_code`` and ``code`` drive the
HTTP error envelope rendered by ``fishing_api.error_handling``.
"""

from __future__ import annotations

from uuid import UUID


class DomainError(Exception):
    status_code = 500
    code = "internal_error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError, LookupError):
    status_code = 404
    code = "not_found"


class NotAuthenticatedError(DomainError, PermissionError):
    status_code = 401
    code = "not_authenticated"


class NotAuthorizedError(DomainError, PermissionError):
    status_code = 403
    code = "not_authorized"


class InvalidRequestError(DomainError, ValueError):
    status_code = 400
    code = "validation_error"


class ConflictError(DomainError, ValueError):
    status_code = 400
    code = "conflict"


class EventNotFound(NotFoundError):
    code = "event_not_found"

    def __init__(self, event_id: UUID) -> None:
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id


class TeamNotFound(NotFoundError):
    code = "team_not_found"

    def __init__(self, team_id: UUID) -> None:
        super().__init__(f"Team not found: {team_id}")
        self.team_id = team_id


class UserNotFound(NotFoundError):
    code = "user_not_found"


class MemberNotFound(NotFoundError):
    code = "member_not_found"


class ParticipantNotFound(NotFoundError):
    code = "participant_not_found"


class NotRegistered(NotFoundError):
    code = "not_registered"


class NotAuthorized(NotAuthorizedError):
    pass


class NotTeamMember(NotAuthorizedError):
    code = "not_team_member"


class WrongFormat(InvalidRequestError):
    code = "wrong_format"


class InvalidEventFormat(InvalidRequestError):
    code = "invalid_format"


class InvalidResultsFormat(InvalidRequestError):
    code = "invalid_results_format"


class AlreadyRegistered(ConflictError):
    code = "already_registered"


class CapacityReached(ConflictError):
    code = "capacity_reached"


class TeamSizeMismatch(ConflictError):
    code = "team_size_mismatch"

    def __init__(self, team_size: int, required_size: int) -> None:
        super().__init__(
            f"Team size ({team_size}) does not match the event format ({required_size})."
        )
        self.team_size = team_size
        self.required_size = required_size


class MemberConflict(ConflictError):
    code = "member_conflict"


class FormatLocked(ConflictError):
    code = "format_locked"


class TeamLocked(ConflictError):
    code = "team_locked"


class TeamFull(ConflictError):
    code = "team_full"


class AlreadyTeamMember(ConflictError):
    code = "already_team_member"


class OwnerRemoval(InvalidRequestError):
    code = "owner_removal"


class EmailTaken(DomainError, ValueError):
    status_code = 409
    code = "email_taken"


class InvalidCredentials(NotAuthenticatedError):
    code = "invalid_credentials"


class InvalidToken(NotAuthenticatedError):
    code = "invalid_token"


class TooManyAttempts(DomainError):
    status_code = 429
    code = "too_many_requests"

    def __init__(self, action: str, retry_after_s: int) -> None:
        super().__init__(f"Too many {action} attempts. Please retry later.")
        self.headers = {"Retry-After": str(retry_after_s)}
