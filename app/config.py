"""Application configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
    )

    # Application
    app_name: str = Field(default="Pharmacy Queue API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./pharmacy_queue.db",
        alias="DATABASE_URL",
    )

    # Redis
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_username: str = Field(default="default", alias="REDIS_USERNAME")
    redis_password: str = Field(default="", alias="REDIS_PASSWORD")
    redis_decode_responses: bool = Field(default=True, alias="REDIS_DECODE_RESPONSES")

    # Admin access
    admin_secret: str = Field(
        default="test-admin-secret-for-development-only",
        alias="ADMIN_SECRET",
        description="Shared secret expected in the X-Admin-Secret header",
    )

    # CORS
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        if isinstance(self.cors_origins_str, str):
            return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]
        return [self.cors_origins_str]

    # Queue
    queue_timezone: str = Field(
        default="America/Toronto",
        alias="QUEUE_TIMEZONE",
        description="Timezone used to pick the booking date embedded in queue numbers",
    )
    default_average_wait_time: int = Field(default=15, alias="DEFAULT_AVERAGE_WAIT_TIME")
    default_max_daily_bookings: int = Field(default=50, alias="DEFAULT_MAX_DAILY_BOOKINGS")
    queue_settings_cache_ttl: int = Field(default=300, alias="QUEUE_SETTINGS_CACHE_TTL")

    # Background tasks
    scheduler_enabled: bool = Field(default=True, alias="SCHEDULER_ENABLED")
    reminder_interval_seconds: int = Field(default=60, alias="REMINDER_INTERVAL_SECONDS")
    cleanup_interval_hours: int = Field(default=24, alias="CLEANUP_INTERVAL_HOURS")
    cleanup_retry_minutes: int = Field(default=60, alias="CLEANUP_RETRY_MINUTES")
    # Roughly six months
    appointment_retention_days: int = Field(default=183, alias="APPOINTMENT_RETENTION_DAYS")

    # Email
    email_enabled: bool = Field(default=True, alias="EMAIL_ENABLED")
    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    smtp_sender_email: str = Field(default="", alias="SMTP_SENDER_EMAIL")
    smtp_sender_name: str = Field(default="Pharmacy Queue System", alias="SMTP_SENDER_NAME")
    smtp_password: str = Field(default="", alias="SMTP_PASSWORD")
    smtp_timeout_seconds: float = Field(default=10.0, alias="SMTP_TIMEOUT_SECONDS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]


# Global settings instance
settings = get_settings()
