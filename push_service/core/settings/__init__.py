"""Modular Pydantic Settings v2 configuration.

Settings are split by domain (firebase/notifications/scheduler/rabbit/logging),
loaded from environment variables or a .env file, frozen after validation and
cached by the loaders below.

Import settings via cached loaders:
    from push_service.core.settings import get_notification_settings

Or use unified settings for convenient access to all domains:
    from push_service.core.settings import get_settings

    settings = get_settings()
    print(settings.scheduler.timezone)
"""

from __future__ import annotations

from .firebase import FirebaseSettings
from .loader import (
    clear_all_caches,
    get_firebase_settings,
    get_logging_settings,
    get_notification_settings,
    get_rabbit_settings,
    get_scheduler_settings,
)
from .logs import LoggingSettings
from .notifications import NotificationSettings
from .rabbit import RabbitSettings
from .scheduler import SchedulerSettings
from .unified import Settings, get_settings

__all__ = [
    "FirebaseSettings",
    "LoggingSettings",
    "NotificationSettings",
    "RabbitSettings",
    "SchedulerSettings",
    "Settings",
    "clear_all_caches",
    "get_firebase_settings",
    "get_logging_settings",
    "get_notification_settings",
    "get_rabbit_settings",
    "get_scheduler_settings",
    "get_settings",
]
