"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./lifestream.db",
        description="Database connection URL used by SQLAlchemy for the blob store",
        min_length=1,
    )
    app_timezone: str = Field(
        default="Asia/Shanghai",
        description="Timezone used to interpret naive event times",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"],
        description="Origins allowed to call the API from a browser",
    )
    reminder_tick_seconds: float = Field(
        default=5.0,
        description="Seconds between two reminder evaluation passes",
        gt=0,
    )
    reminder_retry_attempts: int = Field(
        default=3,
        description="Extra attempts made for a failing delivery channel",
        ge=0,
    )
    reminder_retry_delay_seconds: float = Field(
        default=1.0,
        description="Fixed delay between two delivery attempts",
        ge=0,
    )
    reminder_shutdown_timeout_seconds: float = Field(
        default=10.0,
        description="Seconds shutdown waits for in-flight reminder deliveries before cancelling them",
        ge=0,
    )
    reminder_sound_command: str | None = Field(
        default=None,
        description="Local command used to play reminder sounds; receives the sound name",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending reminder emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of reminder emails",
        min_length=3,
    )
    openai_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible endpoint used to extract events",
    )
    openai_base_url: str | None = Field(
        default="https://api.deepseek.com/v1",
        description="Base URL of the OpenAI-compatible endpoint",
    )
    openai_model: str = Field(default="deepseek-chat", min_length=1)
    openai_temperature: float = Field(default=0.7, ge=0, le=2)

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
