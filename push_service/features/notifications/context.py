"""Explicit collaborator context for the notification core.

Everything the handlers and scans touch is reached through a
``NotificationContext``; nothing is read from module-level globals. Tests
build one from fakes, production builds one in ``dependencies``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from push_service.core.settings.notifications import NotificationSettings
from push_service.features.notifications.dispatcher import PushDispatcher
from push_service.features.notifications.ports import (
    ClientDirectory,
    NotificationRecordStore,
    PushTransport,
    TaskStore,
    UserDirectory,
)
from push_service.features.notifications.resolver import RecipientResolver


@dataclass
class NotificationContext:
    """Handles to the directories, stores and transport used per event."""

    users: UserDirectory
    clients: ClientDirectory
    tasks: TaskStore
    records: NotificationRecordStore
    transport: PushTransport
    settings: NotificationSettings = field(default_factory=NotificationSettings)

    @cached_property
    def resolver(self) -> RecipientResolver:
        return RecipientResolver(self.users)

    @cached_property
    def dispatcher(self) -> PushDispatcher:
        return PushDispatcher(self.transport, click_action=self.settings.click_action)
