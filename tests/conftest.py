"""Pytest configuration and shared fixtures.

Organization:
    - Environment: keeps tests off Firebase and RabbitMQ
    - Collaborator Fixtures: in-memory fakes from ``tests.fakes``
    - Context Fixtures: a ``NotificationContext`` wired to the fakes

When adding new features:
    1. Add fixtures to the appropriate section below
    2. Make fixtures composable (fixtures can depend on other fixtures)
"""

from __future__ import annotations

import os
from datetime import UTC, datetime

import pytest

# Ensure tests run without external infrastructure
os.environ.setdefault("FIREBASE_ENABLED", "false")
os.environ.setdefault("RABBIT_ENABLED", "false")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

from push_service.core.settings import NotificationSettings  # noqa: E402
from push_service.features.notifications.context import NotificationContext  # noqa: E402
from push_service.features.notifications.service import NotificationService  # noqa: E402
from push_service.infra.logging import clear_log_context  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeClientDirectory,
    FakeRecordStore,
    FakeTaskStore,
    FakeTransport,
    FakeUserDirectory,
)

NOW = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_log_context()
    yield
    clear_log_context()


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def users() -> FakeUserDirectory:
    """User directory with a few users and their device tokens.

    - creator@x.com: one token
    - a@x.com: two tokens
    - b@x.com: one token shared with a@x.com
    - c@x.com: no tokens
    - acme users: u1/u2 belong to client "acme"
    """
    directory = FakeUserDirectory()
    directory.add("creator@x.com", ["tok-creator"])
    directory.add("a@x.com", ["tok-a1", "tok-a2"])
    directory.add("b@x.com", ["tok-a2", "tok-b"])
    directory.add("c@x.com", [])
    directory.add("u1@acme.com", ["tok-u1"], client_id="acme")
    directory.add("u2@acme.com", ["tok-u2"], client_id="acme")
    return directory


@pytest.fixture
def clients() -> FakeClientDirectory:
    return FakeClientDirectory({"acme": "Acme Corp"})


@pytest.fixture
def task_store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture
def records() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


# ============================================================================
# Context Fixtures
# ============================================================================


@pytest.fixture
def notification_settings() -> NotificationSettings:
    return NotificationSettings()


@pytest.fixture
def context(users, clients, task_store, records, transport, notification_settings) -> NotificationContext:
    """Notification context wired to the in-memory fakes."""
    return NotificationContext(
        users=users,
        clients=clients,
        tasks=task_store,
        records=records,
        transport=transport,
        settings=notification_settings,
    )


@pytest.fixture
def service(context) -> NotificationService:
    return NotificationService(context)


@pytest.fixture
def now() -> datetime:
    return NOW
