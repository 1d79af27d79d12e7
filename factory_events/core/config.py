"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The database URL and the future-event horizon are
validated at load time.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_DRIVER_PREFIXES = ("sqlite+aiosqlite://", "postgresql+asyncpg://")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Everything has a default, so the service starts against a local SQLite
    file with no configuration at all.
    """

    # App
    app_name: str = "factory-events"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database: any SQLAlchemy async URL (sqlite+aiosqlite or postgresql+asyncpg)
    database_url: str = "sqlite+aiosqlite:///./factory_events.db"
    database_echo: bool = False
    # Optional pool/driver overrides for Postgres (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None
    # SQLite writers serialize; this is how long one waits for the write lock.
    sqlite_busy_timeout_seconds: float = 30.0

    # Ingestion
    future_event_horizon_seconds: int = Field(
        default=15 * 60,
        description="How far ahead of server time an eventTime may be before FUTURE_EVENT_TIME.",
    )

    # Analytics
    top_defect_lines_default_limit: int = 10

    # Request / middleware
    max_request_body_bytes: int = 10 * 1024 * 1024  # 10MB, large batches
    allowed_origins: str = "*"
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_database_and_ingestion(self) -> "Settings":
        """Validate the database URL driver and the ingestion horizon.

        - postgresql:// is rewritten to postgresql+asyncpg:// (async driver).
        - Any other URL must already name an async driver.
        - FUTURE_EVENT_HORIZON_SECONDS must not be negative.
        """
        if self.database_url.startswith("postgresql://"):
            self.database_url = self.database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )
        if not self.database_url.startswith(_ASYNC_DRIVER_PREFIXES):
            raise ValueError(
                f"DATABASE_URL must use an async driver ({', '.join(_ASYNC_DRIVER_PREFIXES)}), "
                f"got: {self.database_url!r}"
            )
        if self.future_event_horizon_seconds < 0:
            raise ValueError("FUTURE_EVENT_HORIZON_SECONDS must be >= 0")
        if self.top_defect_lines_default_limit < 1:
            raise ValueError("TOP_DEFECT_LINES_DEFAULT_LIMIT must be >= 1")
        return self

    @property
    def future_event_horizon(self) -> timedelta:
        return timedelta(seconds=self.future_event_horizon_seconds)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
