"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
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
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="Asia/Kolkata",
        description="Timezone used to decide which calendar day it is for reminders",
    )
    fanout_chunk_size: int = Field(
        default=500,
        description="Number of delivery records written per chunk during fan-out",
        gt=0,
    )
    exam_reminder_offsets: list[int] = Field(
        default_factory=lambda: [7, 1, 0],
        description="Days before an exam on which a reminder is issued",
    )
    max_semester: int = Field(default=8, description="Highest valid semester number", gt=0)
    max_year: int = Field(default=4, description="Highest valid academic year", gt=0)
    welcome_expiry_days: int = Field(default=30, ge=0)
    timetable_expiry_days: int = Field(default=7, ge=0)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    @field_validator("exam_reminder_offsets")
    @classmethod
    def _validate_offsets(cls, value: list[int]) -> list[int]:
        if any(offset < 0 for offset in value):
            raise ValueError("EXAM_REMINDER_OFFSETS must not contain negative values")
        return sorted(set(value), reverse=True)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
