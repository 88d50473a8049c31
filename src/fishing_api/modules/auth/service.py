from __future__ import annotations

import logging
from datetime import timedelta
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from fishing_api.common.datetime_utils import utcnow
from fishing_api.common.errors import EmailTaken, InvalidCredentials, InvalidToken
from fishing_api.config.settings import Settings
from fishing_api.db.models import AuthRefreshToken, User
from fishing_api.modules.auth.repository import AuthRepository
from fishing_api.modules.auth.schemas import (
    AuthLoginRequest,
    AuthRegisterRequest,
    AuthTokenPairResponse,
)
from fishing_api.modules.auth.security import (
    TOKEN_KIND_ACCESS,
    TOKEN_KIND_REFRESH,
    create_token,
    hash_password,
    hash_token,
    read_token,
    verify_password,
)

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    def __init__(self, repository: AuthRepository, settings: Settings) -> None:
        self.repository = repository
        self.settings = settings

    async def register(self, payload: AuthRegisterRequest) -> User:
        email = normalize_email(payload.email)
        if await self.repository.find_user_by_email(email) is not None:
            raise EmailTaken("A user with this email already exists.")
        now = utcnow()
        user = User(
            name=payload.name,
            email=email,
            password_hash=hash_password(payload.password),
            rating=self.settings.rating_default,
            created_at=now,
            updated_at=now,
        )
        try:
            user = await self.repository.insert_user(user)
        except IntegrityError as exc:
            raise EmailTaken("A user with this email already exists.") from exc
        logger.info("user_registered", extra={"user_id": str(user.id)})
        return user

    async def login(self, payload: AuthLoginRequest) -> AuthTokenPairResponse:
        user = await self.repository.find_user_by_email(normalize_email(payload.email))
        if user is None or not verify_password(payload.password, user.password_hash):
            raise InvalidCredentials("Invalid email or password.")
        if not user.is_active:
            raise InvalidCredentials("This account is disabled.")
        logger.info("user_logged_in", extra={"user_id": str(user.id)})
        return await self._issue_token_pair(user.id)

    async def refresh(self, refresh_token: str) -> AuthTokenPairResponse:
        """Rotate a refresh token: the presented token is revoked, a new pair issued."""
        user_id = self._read(refresh_token, TOKEN_KIND_REFRESH)
        now = utcnow()
        stored = await self.repository.find_refresh_token(hash_token(refresh_token))
        if stored is None or not stored.is_usable(now):
            raise InvalidToken("Refresh token is revoked or expired.")
        user = await self.repository.get_user(user_id)
        if user is None or not user.is_active:
            raise InvalidToken("Refresh token is no longer valid.")

        stored.revoke(now)
        return await self._issue_token_pair(user_id)

    async def logout(self, refresh_token: str) -> None:
        stored = await self.repository.find_refresh_token(hash_token(refresh_token))
        if stored is not None and stored.revoked_at is None:
            stored.revoke(utcnow())
            await self.repository.commit()

    async def get_user_from_access_token(self, access_token: str) -> User:
        user = await self.repository.get_user(self._read(access_token, TOKEN_KIND_ACCESS))
        if user is None or not user.is_active:
            raise InvalidToken("The account behind this token is not available.")
        return user

    def _read(self, token: str, kind: str) -> UUID:
        return read_token(
            token,
            kind=kind,
            secret=self.settings.auth_jwt_secret,
            algorithm=self.settings.auth_jwt_algorithm,
        )

    def _token(self, user_id: UUID, kind: str, ttl: timedelta) -> str:
        return create_token(
            user_id=user_id,
            kind=kind,
            secret=self.settings.auth_jwt_secret,
            algorithm=self.settings.auth_jwt_algorithm,
            ttl=ttl,
        )

    async def _issue_token_pair(self, user_id: UUID) -> AuthTokenPairResponse:
        refresh_ttl = timedelta(days=self.settings.auth_refresh_token_ttl_days)
        access = self._token(
            user_id,
            TOKEN_KIND_ACCESS,
            timedelta(minutes=self.settings.auth_access_token_ttl_minutes),
        )
        refresh = self._token(user_id, TOKEN_KIND_REFRESH, refresh_ttl)
        await self.repository.add_refresh_token(
            AuthRefreshToken(
                user_id=user_id,
                token_hash=hash_token(refresh),
                expires_at=utcnow() + refresh_ttl,
            )
        )
        await self.repository.commit()
        return AuthTokenPairResponse(access_token=access, refresh_token=refresh)
