from .auth_refresh_token import AuthRefreshToken
from .event_result import EventResult
from .fish_catch import FishCatch
from .fishing_event import FishingEvent
from .fishing_participant import FishingParticipant
from .rating_history import TeamRatingHistory, UserRatingHistory
from .team import Team
from .team_member import TeamMember
from .team_participation import TeamParticipation
from .user import User

__all__ = [
    "AuthRefreshToken",
    "EventResult",
    "FishCatch",
    "FishingEvent",
    "FishingParticipant",
    "Team",
    "TeamMember",
    "TeamParticipation",
    "TeamRatingHistory",
    "User",
    "UserRatingHistory",
]
