"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from push_service.core.settings.loader import get_firebase_settings

    settings = get_firebase_settings()  # First call: loads and validates
    settings = get_firebase_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_firebase_settings.cache_clear()

    Or override with custom values:
    settings = FirebaseSettings(project_id="demo", ...)
"""

from __future__ import annotations

from functools import lru_cache

from .firebase import FirebaseSettings
from .logs import LoggingSettings
from .notifications import NotificationSettings
from .rabbit import RabbitSettings
from .scheduler import SchedulerSettings


@lru_cache(maxsize=1)
def get_firebase_settings() -> FirebaseSettings:
    """Get cached Firebase settings.

    Returns:
        Validated and frozen FirebaseSettings instance.
    """
    return FirebaseSettings()


@lru_cache(maxsize=1)
def get_notification_settings() -> NotificationSettings:
    """Get cached notification settings.

    Returns:
        Validated and frozen NotificationSettings instance.
    """
    return NotificationSettings()


@lru_cache(maxsize=1)
def get_scheduler_settings() -> SchedulerSettings:
    """Get cached scheduler settings.

    Returns:
        Validated and frozen SchedulerSettings instance.
    """
    return SchedulerSettings()


@lru_cache(maxsize=1)
def get_rabbit_settings() -> RabbitSettings:
    """Get cached RabbitMQ settings.

    Returns:
        Validated and frozen RabbitSettings instance.
    """
    return RabbitSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_all_caches() -> None:
    """Clear every cached settings instance (useful in tests)."""
    get_firebase_settings.cache_clear()
    get_notification_settings.cache_clear()
    get_scheduler_settings.cache_clear()
    get_rabbit_settings.cache_clear()
    get_logging_settings.cache_clear()
