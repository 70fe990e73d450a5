"""Application settings and configuration.

This module defines all configuration options for the CodeGram backend.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="CodeGram", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(default="codegram-dev-secret-change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./codegram.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Redis is only required when the realtime bus runs in distributed mode
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")

    # Realtime gateway
    realtime_backend: Literal["memory", "redis"] = Field(
        default="memory",
        alias="REALTIME_BACKEND",
    )
    realtime_channel: str = Field(default="codegram:realtime", alias="REALTIME_CHANNEL")
    realtime_rate_window_seconds: float = Field(
        default=60.0,
        alias="REALTIME_RATE_WINDOW_SECONDS",
    )
    realtime_user_room_limit: int = Field(default=5, alias="REALTIME_USER_ROOM_LIMIT")
    realtime_content_room_limit: int = Field(default=10, alias="REALTIME_CONTENT_ROOM_LIMIT")
    realtime_max_id_length: int = Field(default=50, alias="REALTIME_MAX_ID_LENGTH")

    # Bug reports are short-lived
    bug_ttl_hours: int = Field(default=24, alias="BUG_TTL_HOURS")
    bug_sweep_interval_seconds: float = Field(
        default=3600.0,
        alias="BUG_SWEEP_INTERVAL_SECONDS",
    )
    # Only one instance should run periodic maintenance jobs
    primary_instance: bool = Field(default=False, alias="PRIMARY_INSTANCE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def realtime_rate_limits(self) -> dict[str, int]:
        """Per-minute limits for client-issued realtime events."""
        return {
            "join-user-room": self.realtime_user_room_limit,
            "join-content-room": self.realtime_content_room_limit,
            "leave-content-room": self.realtime_content_room_limit,
        }


settings = Settings()
