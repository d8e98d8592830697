"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key used to verify JWT access tokens", min_length=1
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    client_url: str = Field(
        default="http://localhost:5173",
        description="Public URL of the marketplace web client, used for links in emails",
    )
    app_timezone: str = Field(
        default="Asia/Jerusalem",
        description="IANA timezone name used for stored timestamps",
        min_length=1,
    )
    dispatch_max_workers: int = Field(
        default=8,
        description="Maximum number of notification deliveries running at the same time",
        gt=0,
    )
    send_timeout_seconds: float = Field(
        default=30.0,
        description="Seconds to wait for a single delivery before treating it as failed",
        gt=0,
    )
    notification_max_retries: int = Field(
        default=3,
        description="Failed deliveries with this many attempts are no longer retried",
        ge=1,
    )
    retry_batch_size: int = Field(
        default=50,
        description="Maximum number of failed notifications picked up by one retry sweep",
        gt=0,
    )
    sending_stale_after_minutes: int = Field(
        default=15,
        description="Minutes after which a delivery stuck in SENDING may be reclaimed",
        gt=0,
    )

    @field_validator("app_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        name = value.strip()
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown APP_TIMEZONE: {value}") from exc
        return name

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
