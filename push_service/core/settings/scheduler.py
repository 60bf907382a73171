"""Scheduled job settings.

Environment variables use SCHEDULER_ prefix.
Example: SCHEDULER_TIMEZONE=Asia/Kolkata
"""

from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulerSettings(BaseSettings):
    """APScheduler configuration for the overdue scan and cleanup jobs."""

    enabled: bool = Field(
        default=True,
        description="Register the recurring jobs when the scheduler starts.",
    )

    timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA time zone the cron expressions are evaluated in.",
    )

    overdue_cron: str = Field(
        default="0 9 * * *",
        description="Crontab for the overdue-task scan (daily at 09:00).",
    )

    cleanup_cron: str = Field(
        default="0 0 * * 0",
        description="Crontab for notification cleanup (Sundays at midnight).",
    )

    misfire_grace_seconds: int = Field(
        default=300,
        ge=1,
        le=86400,
        description="How late a job may start before APScheduler skips the run.",
    )

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v!r}") from e
        return v

    @field_validator("overdue_cron", "cleanup_cron")
    @classmethod
    def _validate_cron(cls, v: str) -> str:
        if len(v.split()) != 5:
            raise ValueError(f"Expected a 5-field crontab expression, got {v!r}")
        return v
