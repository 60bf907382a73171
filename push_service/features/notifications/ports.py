"""Collaborator protocols consumed by the notification core.

Production implementations live in ``push_service.infra.firebase``; tests
substitute in-memory fakes. Implementations return None/empty for a missing
document and raise ``DirectoryLookupError`` / ``TransportError`` for real
failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from push_service.features.notifications.models import (
        ClientRecord,
        MulticastRequest,
        MulticastResult,
        NotificationRecordRef,
        TaskDocument,
        UserRecord,
    )


class UserDirectory(Protocol):
    """Equality queries over user records."""

    async def find_by_email(self, email: str) -> UserRecord | None:
        """Return the first user whose email matches exactly, or None."""
        ...

    async def find_by_client(self, client_id: str) -> Sequence[UserRecord]:
        """Return every user belonging to the given client."""
        ...


class ClientDirectory(Protocol):
    """Point lookups over client records."""

    async def get_client(self, client_id: str) -> ClientRecord | None:
        """Return the client record, or None if it does not exist."""
        ...


class TaskStore(Protocol):
    """Read access to tasks for the overdue scan."""

    async def find_overdue(
        self,
        now: datetime,
        statuses: Sequence[str],
    ) -> Sequence[TaskDocument]:
        """Return tasks due before ``now`` whose status is in ``statuses``."""
        ...


class NotificationRecordStore(Protocol):
    """Range query and atomic batch delete over notification records."""

    async def find_created_before(self, cutoff_ms: int) -> Sequence[NotificationRecordRef]:
        """Return records whose ``createdAt`` (epoch ms) is before the cutoff."""
        ...

    async def delete_batch(self, records: Sequence[NotificationRecordRef]) -> None:
        """Delete all given records in one atomic batch."""
        ...


class PushTransport(Protocol):
    """Multicast push delivery."""

    async def send_multicast(self, request: MulticastRequest) -> MulticastResult:
        """Send one multicast message.

        Returns:
            Per-endpoint results in the same order as ``request.endpoints``.

        Raises:
            TransportError: If the call fails as a whole.
        """
        ...
