from __future__ import annotations

from functools import lru_cache
from typing import Literal
from urllib.parse import quote

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PRODUCTION_ENVS = frozenset({"production", "prod"})
_WEAK_JWT_SECRETS = frozenset(
    {"", "changeme", "change-me", "dev-change-me", "secret", "jwt-secret"}
)
_MIN_JWT_SECRET_LEN = 32


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Fishing Events API"
    app_env: str = "development"
    app_debug: bool = False
    app_host: str = "127.0.0.1"
    app_port: int = 8000
    app_log_level: str = "INFO"
    app_log_json: bool = True
    app_log_requests: bool = True
    app_docs_enabled: bool = True
    app_cors_origins: list[str] = []
    app_cors_allow_credentials: bool = True
    app_cors_allow_methods: list[str] = ["*"]
    app_cors_allow_headers: list[str] = ["*"]

    # If set, this value has priority over component-based database settings.
    database_url: str = ""

    # PostgreSQL components
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "fishing_events"
    db_user: str = "postgres"
    db_password: str = ""
    db_timezone: str = "UTC"

    # SQLAlchemy/asyncpg runtime tuning
    db_echo: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 10
    db_pool_timeout_s: int = 30
    db_pool_recycle_s: int = 1800

    # Auth/JWT
    auth_jwt_secret: str = ""
    auth_jwt_algorithm: str = "HS256"
    auth_access_token_ttl_minutes: int = 30
    auth_refresh_token_ttl_days: int = 14
    auth_rate_limit_enabled: bool = True
    auth_login_rate_limit_requests: int = 10
    auth_login_rate_limit_window_s: int = 60
    auth_refresh_rate_limit_requests: int = 20
    auth_refresh_rate_limit_window_s: int = 60

    # Results & rating engine
    rating_default: int = 1000
    rating_strategy: Literal["placement", "elo"] = "placement"
    rating_elo_k_factor: float = Field(default=32.0, gt=0)
    results_resubmit_policy: Literal["compound", "revert"] = "compound"

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() in PRODUCTION_ENVS

    @model_validator(mode="after")
    def reject_weak_jwt_secret(self) -> Settings:
        if not self.is_production:
            return self
        secret = self.auth_jwt_secret.strip()
        if secret.lower() in _WEAK_JWT_SECRETS:
            raise ValueError("auth_jwt_secret must be set to a real secret in production.")
        if len(secret) < _MIN_JWT_SECRET_LEN:
            raise ValueError(
                f"auth_jwt_secret must be at least {_MIN_JWT_SECRET_LEN} characters in production."
            )
        return self

    @computed_field
    @property
    def sqlalchemy_database_url(self) -> str:
        if self.database_url.strip():
            return self.database_url
        user = quote(self.db_user, safe="")
        password = quote(self.db_password, safe="")
        return (
            f"postgresql+asyncpg://{user}:{password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @computed_field
    @property
    def docs_url(self) -> str | None:
        return "/docs" if self.app_docs_enabled else None

    @computed_field
    @property
    def redoc_url(self) -> str | None:
        return "/redoc" if self.app_docs_enabled else None

    @property
    def is_sqlite(self) -> bool:
        return self.sqlalchemy_database_url.startswith("sqlite")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
