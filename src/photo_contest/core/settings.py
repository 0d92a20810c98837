"""Application settings and configuration.

This module defines all process-level configuration for the photo contest
service. Settings are loaded from environment variables with sensible defaults.
Per-contest switches (voting/submission windows, theme, rules) live in the
database instead; see ``photo_contest.services.settings_store``.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Photo Contest", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./contest.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Admin authentication
    admin_password: str = Field(alias="ADMIN_PASSWORD")
    # None keeps sessions valid until logout.
    admin_session_ttl_seconds: int | None = Field(
        default=None,
        alias="ADMIN_SESSION_TTL_SECONDS",
    )

    # Submission and voting policy
    one_submission_per_user: bool = Field(default=True, alias="ONE_SUBMISSION_PER_USER")
    submission_scope: Literal["contest", "global"] = Field(
        default="contest",
        alias="SUBMISSION_SCOPE",
    )
    vote_mode: Literal["permanent", "toggle"] = Field(default="permanent", alias="VOTE_MODE")
    min_image_width: int = Field(default=1920, alias="MIN_IMAGE_WIDTH")
    min_image_height: int = Field(default=1080, alias="MIN_IMAGE_HEIGHT")
    max_image_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_IMAGE_BYTES")

    # Image storage collaborator
    storage_backend: Literal["local", "http"] = Field(default="local", alias="STORAGE_BACKEND")
    storage_local_dir: str = Field(default="./uploads", alias="STORAGE_LOCAL_DIR")
    storage_public_base_url: str = Field(default="/uploads", alias="STORAGE_PUBLIC_BASE_URL")
    storage_http_url: str | None = Field(default=None, alias="STORAGE_HTTP_URL")
    storage_http_token: str | None = Field(default=None, alias="STORAGE_HTTP_TOKEN")
    storage_http_timeout_seconds: float = Field(
        default=15.0,
        alias="STORAGE_HTTP_TIMEOUT_SECONDS",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
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
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
