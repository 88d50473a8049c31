from __future__ import annotations

from enum import Enum


class EventFormat(str, Enum):
    SOLO = "solo"
    TEAM_2 = "team_2"
    TEAM_3 = "team_3"

    @property
    def team_size(self) -> int | None:
        if self is EventFormat.TEAM_2:
            return 2
        if self is EventFormat.TEAM_3:
            return 3
        return None


class TeamRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class ParticipantType(str, Enum):
    USER = "user"
    TEAM = "team"


class RatingSort(str, Enum):
    RECENT = "recent"
    RATING = "rating"
