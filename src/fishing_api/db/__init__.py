from . import enums, models
from .session import (
    engine_options,
    get_engine,
    get_session,
    get_sessionmaker,
    init_db,
    session_scope,
)

__all__ = [
    "engine_options",
    "enums",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_db",
    "models",
    "session_scope",
]
