from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fishing_api.common.errors import NotAuthenticatedError, NotAuthorizedError
from fishing_api.config.settings import Settings
from fishing_api.db.models import User
from fishing_api.deps.common import SESSION_DEP, SETTINGS_DEP
from fishing_api.modules.auth.repository import AuthRepository
from fishing_api.modules.auth.service import AuthService

BEARER_DEP = Depends(
    HTTPBearer(
        auto_error=False,
        scheme_name="bearerAuth",
        description="Access token issued by /api/v1/auth/login.",
    )
)


def get_auth_service_dep(
    session: AsyncSession = SESSION_DEP,
    settings: Settings = SETTINGS_DEP,
) -> AuthService:
    return AuthService(repository=AuthRepository(session=session), settings=settings)


AUTH_SERVICE_DEP = Depends(get_auth_service_dep)


async def get_current_user_dep(
    credentials: HTTPAuthorizationCredentials | None = BEARER_DEP,
    auth_service: AuthService = AUTH_SERVICE_DEP,
) -> User:
    """Resolve the angler behind the bearer token; token errors surface as 401."""
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError("Not authenticated.")
    return await auth_service.get_user_from_access_token(credentials.credentials)


CURRENT_USER_DEP = Depends(get_current_user_dep)


def get_admin_user_dep(current_user: User = CURRENT_USER_DEP) -> User:
    if not current_user.is_admin:
        raise NotAuthorizedError("Admin privileges required.")
    return current_user
