"""Notification content and retention settings.

Environment variables use NOTIFY_ prefix.
Example: NOTIFY_RETENTION_DAYS=30
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_OVERDUE_STATUSES = ("assigned", "inProgress", "pendingReview")


class NotificationSettings(BaseSettings):
    """Settings for notification payloads and maintenance jobs."""

    click_action: str = Field(
        default="FLUTTER_NOTIFICATION_CLICK",
        min_length=1,
        description="Routing marker added to every data payload as click_action.",
    )

    fallback_client_name: str = Field(
        default="Your company",
        min_length=1,
        description="Client name used when the client record is missing or unreadable.",
    )

    retention_days: int = Field(
        default=30,
        ge=1,
        le=3650,
        description="Notification records older than this many days are deleted by cleanup.",
    )

    overdue_statuses: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_OVERDUE_STATUSES,
        description="Task statuses that count as open for the overdue scan.",
    )

    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("overdue_statuses", mode="before")
    @classmethod
    def _split_statuses(cls, v: object) -> object:
        """Accept a comma-separated string from the environment."""
        if isinstance(v, str):
            return tuple(part.strip() for part in v.split(",") if part.strip())
        return v
