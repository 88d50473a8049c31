from __future__ import annotations

from fastapi import Depends, Request

from fishing_api.config.settings import Settings, get_settings
from fishing_api.db.session import get_session


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with, falling back to the environment."""
    state_settings = getattr(request.app.state, "settings", None)
    if isinstance(state_settings, Settings):
        return state_settings
    return get_settings()


SESSION_DEP = Depends(get_session)
SETTINGS_DEP = Depends(get_app_settings)
