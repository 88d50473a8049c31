from .auth import get_admin_user_dep, get_current_user_dep
from .events import get_events_service_dep
from .participation import get_participation_service_dep
from .ratings import get_ratings_service_dep
from .results import get_results_service_dep
from .teams import get_teams_service_dep

__all__ = [
    "get_admin_user_dep",
    "get_current_user_dep",
    "get_events_service_dep",
    "get_participation_service_dep",
    "get_ratings_service_dep",
    "get_results_service_dep",
    "get_teams_service_dep",
]
