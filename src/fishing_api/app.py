from __future__ import annotations

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fishing_api.config import Settings, get_settings
from fishing_api.error_handling import register_error_handlers
from fishing_api.modules.auth.rate_limit import AuthRateLimiter
from fishing_api.modules.auth.router import router as auth_router
from fishing_api.modules.events.router import router as events_router
from fishing_api.modules.health.router import router as health_router
from fishing_api.modules.participation.router import router as participation_router
from fishing_api.modules.ratings.router import router as ratings_router
from fishing_api.modules.results.router import router as results_router
from fishing_api.modules.teams.router import router as teams_router
from fishing_api.observability import configure_logging, register_request_logging

API_PREFIX = "/api/v1"

# Mounted under API_PREFIX; health stays at the root for probes.
API_ROUTERS: tuple[APIRouter, ...] = (
    auth_router,
    events_router,
    participation_router,
    results_router,
    teams_router,
    ratings_router,
)


def create_app(settings: Settings | None = None) -> FastAPI:
    cfg = settings or get_settings()
    configure_logging(cfg)

    app = FastAPI(
        title=cfg.app_name,
        debug=cfg.app_debug,
        docs_url=cfg.docs_url,
        redoc_url=cfg.redoc_url,
    )
    app.state.settings = cfg
    app.state.auth_rate_limiter = AuthRateLimiter.from_settings(cfg)

    register_error_handlers(app)
    if cfg.app_log_requests:
        register_request_logging(app)
    if cfg.app_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cfg.app_cors_origins,
            allow_credentials=cfg.app_cors_allow_credentials,
            allow_methods=cfg.app_cors_allow_methods,
            allow_headers=cfg.app_cors_allow_headers,
        )

    app.include_router(health_router)
    for router in API_ROUTERS:
        app.include_router(router, prefix=API_PREFIX)
    return app


app = create_app()
