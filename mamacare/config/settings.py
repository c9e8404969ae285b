from typing import Any
from urllib.parse import quote_plus

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Reminder engine configuration using Pydantic BaseSettings.
    Loads environment variables (and .env) automatically.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "MamaCare Reminder Engine"
    PROJECT_DESCRIPTION: str = "Reminder and push notification scheduling for MamaCare"
    VERSION: str = "0.1.0"

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="Log format: colored, json or plain")

    # PostgreSQL Database Settings
    DATABASE_URL: str | None = Field(None, description="Full async SQLAlchemy URL (overrides DB_* fields)")
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("mamacare", description="Database name")
    DB_USER: str = Field("postgres", description="PostgreSQL user")
    DB_PASSWORD: str | None = Field(None, description="PostgreSQL password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")
    DB_POOL_SIZE: int = Field(10, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(5, description="Connection pool overflow")
    DB_POOL_RECYCLE: int = Field(1800, description="Recycle pooled connections after N seconds")

    # Expo push service
    EXPO_API_BASE: str = Field("https://exp.host/--/api/v2", description="Expo push API base URL")
    EXPO_ACCESS_TOKEN: str | None = Field(None, description="Expo access token (enhanced push security)")
    EXPO_REQUEST_TIMEOUT: float = Field(30.0, description="Timeout for Expo requests in seconds")
    PUSH_MAX_CONCURRENT_BATCHES: int = Field(4, description="Batches sent concurrently per dispatch")
    PUSH_RECEIPT_DELAY_MINUTES: int = Field(15, description="Minimum ticket age before fetching its receipt")
    PUSH_RECEIPT_TTL_HOURS: int = Field(24, description="Drop unresolved tickets after this many hours")

    # Reminder scheduler
    REMINDER_SCHEDULER_ENABLED: bool = Field(True, description="Start the reminder runner on startup")
    REMINDER_TIMEZONE: str = Field("Africa/Harare", description="Timezone for daily jobs and dose times")
    REMINDER_STARTUP_DELAY_SECONDS: int = Field(30, description="Delay before the post-boot catch-up run")

    APPOINTMENT_POLL_MINUTES: int = Field(60, description="Appointment reminder poll interval")
    MEDICATION_POLL_MINUTES: int = Field(15, description="Medication reminder poll interval")
    RECEIPT_POLL_MINUTES: int = Field(15, description="Push receipt reconciliation interval")

    DAY_BEFORE_TOLERANCE_MINUTES: int = Field(60, description="Tolerance around T-24h")
    HOUR_BEFORE_TOLERANCE_MINUTES: int = Field(15, description="Tolerance around T-1h")
    MEDICATION_TOLERANCE_MINUTES: int = Field(15, description="Tolerance around each dose time")

    PREGNANCY_DAILY_HOUR: int = Field(9, description="Hour for gestational update + milestones (0-23)")
    CHECKUP_DAILY_HOUR: int = Field(8, description="Hour for checkup nudges (0-23)")
    CLEANUP_DAILY_HOUR: int = Field(0, description="Hour for reminder marker cleanup (0-23)")

    CHECKUP_INTERVAL_MONTHS: int = Field(6, description="Months since last visit before a checkup nudge")
    REMINDER_MARKER_RETENTION_DAYS: int = Field(30, description="Clear markers of events older than this")

    # Sentry Configuration
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN for error tracking")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self, **data: Any):
        super().__init__(**data)

    @field_validator("PREGNANCY_DAILY_HOUR", "CHECKUP_DAILY_HOUR", "CLEANUP_DAILY_HOUR")
    @classmethod
    def validate_hour(cls, v):
        if not 0 <= v <= 23:
            raise ValueError("Daily job hours must be between 0 and 23")
        return v

    @field_validator(
        "APPOINTMENT_POLL_MINUTES",
        "MEDICATION_POLL_MINUTES",
        "RECEIPT_POLL_MINUTES",
        "DAY_BEFORE_TOLERANCE_MINUTES",
        "HOUR_BEFORE_TOLERANCE_MINUTES",
        "MEDICATION_TOLERANCE_MINUTES",
        "PUSH_MAX_CONCURRENT_BATCHES",
        "CHECKUP_INTERVAL_MONTHS",
        "REMINDER_MARKER_RETENTION_DAYS",
    )
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator("REMINDER_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v):
        import pytz

        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be one of: colored, json, plain")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL for the platform database."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_PASSWORD:
            password = quote_plus(self.DB_PASSWORD)
            return f"postgresql+asyncpg://{quote_plus(self.DB_USER)}:{password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql+asyncpg://{quote_plus(self.DB_USER)}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Whether the app runs in a development environment."""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]


# Cached settings instance
_settings_instance = None


def get_settings() -> Settings:
    """
    Return a cached Settings instance.
    Avoids re-reading the environment on every call.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
