from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from fishing_api.config import Settings
from fishing_api.db.session import get_engine
from fishing_api.deps.common import SETTINGS_DEP

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    app: str
    env: str
    rating_strategy: str


class HealthReadyResponse(HealthResponse):
    checks: dict[str, bool]


async def _database_reachable() -> bool:
    try:
        async with get_engine().connect() as connection:
            await connection.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("readiness_db_check_failed", extra={"error": str(exc)})
        return False
    return True


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health Check",
    description="Liveness probe. Does not touch the database.",
    responses={
        200: {
            "description": "Service is alive.",
            "content": {
                "application/json": {
                    "example": {
                        "status": "ok",
                        "app": "Fishing Events API",
                        "env": "development",
                        "rating_strategy": "placement",
                    }
                }
            },
        }
    },
)
def get_health(settings: Settings = SETTINGS_DEP) -> HealthResponse:
    return HealthResponse(
        status="ok",
        app=settings.app_name,
        env=settings.app_env,
        rating_strategy=settings.rating_strategy,
    )


@router.get(
    "/ready",
    response_model=HealthReadyResponse,
    summary="Readiness Check",
    description="Readiness probe. Verifies the database answers a trivial query.",
    responses={
        503: {
            "description": "Database unreachable.",
            "content": {
                "application/json": {
                    "example": {
                        "error_code": "service_unavailable",
                        "message": "Database not ready",
                        "detail": "Database not ready",
                        "request_id": "req-123",
                    }
                }
            },
        },
    },
)
async def get_ready(settings: Settings = SETTINGS_DEP) -> HealthReadyResponse:
    if not await _database_reachable():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not ready",
        )
    return HealthReadyResponse(
        status="ready",
        app=settings.app_name,
        env=settings.app_env,
        rating_strategy=settings.rating_strategy,
        checks={"db": True},
    )
