from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from fishing_api.db.models import User
from fishing_api.deps.auth import AUTH_SERVICE_DEP, CURRENT_USER_DEP
from fishing_api.modules.auth.rate_limit import AuthRateLimiter
from fishing_api.modules.auth.schemas import (
    AuthLoginRequest,
    AuthRefreshRequest,
    AuthRegisterRequest,
    AuthTokenPairResponse,
    AuthUserResponse,
)
from fishing_api.modules.auth.security import hash_token
from fishing_api.modules.auth.service import AuthService, normalize_email

router = APIRouter(prefix="/auth", tags=["auth"])


def _throttle(request: Request, action: str, principal: str) -> None:
    limiter = getattr(request.app.state, "auth_rate_limiter", None)
    if not isinstance(limiter, AuthRateLimiter):
        return
    forwarded_for = request.headers.get("x-forwarded-for", "")
    client_ip = forwarded_for.split(",")[0].strip()
    if not client_ip:
        client_ip = request.client.host if request.client is not None else "unknown"
    limiter.enforce(action, client_ip=client_ip, principal=principal)


@router.post(
    "/register",
    response_model=AuthUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Angler",
    description="Creates an account. The email is stored lower-cased and must be unique.",
    responses={409: {"description": "Email already registered."}},
)
async def post_register(
    payload: AuthRegisterRequest,
    auth_service: AuthService = AUTH_SERVICE_DEP,
) -> AuthUserResponse:
    user = await auth_service.register(payload)
    return AuthUserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=AuthTokenPairResponse,
    summary="Login",
    description="Exchanges email and password for an access/refresh token pair.",
    responses={
        401: {"description": "Unknown email, wrong password or disabled account."},
        429: {"description": "Login attempts throttled for this client and email."},
    },
)
async def post_login(
    request: Request,
    payload: AuthLoginRequest,
    auth_service: AuthService = AUTH_SERVICE_DEP,
) -> AuthTokenPairResponse:
    _throttle(request, "login", normalize_email(payload.email))
    return await auth_service.login(payload)


@router.post(
    "/refresh",
    response_model=AuthTokenPairResponse,
    summary="Refresh Tokens",
    description="Revokes the presented refresh token and issues a fresh pair.",
    responses={
        401: {"description": "Refresh token invalid, revoked or expired."},
        429: {"description": "Refresh attempts throttled."},
    },
)
async def post_refresh(
    request: Request,
    payload: AuthRefreshRequest,
    auth_service: AuthService = AUTH_SERVICE_DEP,
) -> AuthTokenPairResponse:
    _throttle(request, "refresh", hash_token(payload.refresh_token)[:24])
    return await auth_service.refresh(payload.refresh_token)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Revokes a refresh token. Issued access tokens stay valid until they expire.",
)
async def post_logout(
    payload: AuthRefreshRequest,
    auth_service: AuthService = AUTH_SERVICE_DEP,
) -> Response:
    await auth_service.logout(payload.refresh_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/me",
    response_model=AuthUserResponse,
    summary="Current Angler",
    description="Profile of the authenticated user, including the current rating.",
)
async def get_me(current_user: User = CURRENT_USER_DEP) -> AuthUserResponse:
    return AuthUserResponse.model_validate(current_user)
