"""Unified settings composition for convenient access.

Usage:
    from push_service.core.settings import get_settings

    settings = get_settings()
    print(settings.firebase.project_id)
    print(settings.scheduler.timezone)

Each nested settings class still respects its own env prefix.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .firebase import FirebaseSettings
from .logs import LoggingSettings
from .notifications import NotificationSettings
from .rabbit import RabbitSettings
from .scheduler import SchedulerSettings


class Settings(BaseSettings):
    """Unified settings composing all domain settings.

    Example:
        settings = Settings()
        assert settings.notifications.retention_days == 30
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra="ignore",
    )

    firebase: FirebaseSettings = Field(default_factory=FirebaseSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    rabbit: RabbitSettings = Field(default_factory=RabbitSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get unified settings instance (cached).

    Returns:
        Settings: Unified settings with all domain configurations.
    """
    return Settings()
