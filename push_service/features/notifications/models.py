"""Domain models for push notification dispatch.

Snapshot models (``TaskDocument``, ``ReportDocument``, ``UserRecord``,
``ClientRecord``) are built from raw document mappings delivered by the
change source or read from the directory. Their validators sanitize
malformed fields into empty values instead of raising, so a bad document
yields "nothing to notify" rather than a failed invocation.

Value objects (``Message``, ``DispatchIntent``, ``DispatchOutcome``) are
ephemeral and never persisted.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(StrEnum):
    """Closed set of task lifecycle states."""

    ASSIGNED = "assigned"
    IN_PROGRESS = "inProgress"
    PENDING_REVIEW = "pendingReview"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"

    @classmethod
    def parse(cls, value: object) -> TaskStatus | None:
        """Return the matching status, or None for unknown values."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class TaskPriority(StrEnum):
    """Task priority with its visual severity marker."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def marker(self) -> str:
        return _PRIORITY_MARKERS[self]


_PRIORITY_MARKERS = {
    TaskPriority.HIGH: "🔴",
    TaskPriority.MEDIUM: "🟡",
    TaskPriority.LOW: "🟢",
}


class NotificationType(StrEnum):
    """Value of the ``type`` key in every data payload."""

    TASK_ASSIGNED = "task_assigned"
    TASK_STARTED = "task_started"
    TASK_SUBMITTED = "task_submitted"
    TASK_APPROVED = "task_approved"
    TASK_REJECTED = "task_rejected"
    TASK_INCOMPLETE = "task_incomplete"
    TASK_OVERDUE = "task_overdue"
    REPORT_CREATED = "report_created"


def clean_identifiers(value: object) -> list[str]:
    """Keep only non-empty string entries of a list-like value.

    Anything that is not a list or tuple (None, a bare string, a mapping)
    sanitizes to an empty list.
    """
    if not isinstance(value, list | tuple):
        return []
    return [item for item in value if isinstance(item, str) and item]


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


# =============================================================================
# Snapshot models
# =============================================================================


class _Snapshot(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class TaskDocument(_Snapshot):
    """Snapshot of a task document."""

    id: str
    title: str | None = None
    status: str | None = None
    created_by: str | None = Field(default=None, alias="createdBy")
    assigned_to: list[str] = Field(default_factory=list, alias="assignedTo")
    due_date: datetime | None = Field(default=None, alias="dueDate")
    admin_comments: str | None = Field(default=None, alias="adminComments")
    priority: TaskPriority = TaskPriority.MEDIUM

    @field_validator("title", "status", "created_by", "admin_comments", mode="before")
    @classmethod
    def _coerce_text(cls, v: object) -> str | None:
        return _optional_str(v)

    @field_validator("assigned_to", mode="before")
    @classmethod
    def _coerce_assignees(cls, v: object) -> list[str]:
        return clean_identifiers(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _coerce_due_date(cls, v: object) -> datetime | None:
        # Firestore returns DatetimeWithNanoseconds, a datetime subclass;
        # queued events carry ISO-8601 strings
        if isinstance(v, str):
            try:
                v = datetime.fromisoformat(v)
            except ValueError:
                return None
        if not isinstance(v, datetime):
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, v: object) -> TaskPriority:
        if isinstance(v, str):
            try:
                return TaskPriority(v)
            except ValueError:
                pass
        return TaskPriority.MEDIUM

    @classmethod
    def from_snapshot(cls, document_id: str, data: Mapping[str, Any] | None) -> TaskDocument:
        """Build from a raw document mapping; None yields an empty task."""
        return cls.model_validate({**(data or {}), "id": document_id})

    @property
    def task_status(self) -> TaskStatus | None:
        return TaskStatus.parse(self.status)

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"

    @property
    def creator(self) -> list[str]:
        return [self.created_by] if self.created_by else []


class ReportDocument(_Snapshot):
    """Snapshot of a report document."""

    id: str
    client_id: str | None = Field(default=None, alias="clientId")

    @field_validator("client_id", mode="before")
    @classmethod
    def _coerce_client(cls, v: object) -> str | None:
        return _optional_str(v)

    @classmethod
    def from_snapshot(cls, document_id: str, data: Mapping[str, Any] | None) -> ReportDocument:
        return cls.model_validate({**(data or {}), "id": document_id})


class UserRecord(_Snapshot):
    """User directory entry with its registered device tokens."""

    email: str | None = None
    client_id: str | None = Field(default=None, alias="clientId")
    fcm_tokens: list[str] = Field(default_factory=list, alias="fcmTokens")

    @field_validator("email", "client_id", mode="before")
    @classmethod
    def _coerce_text(cls, v: object) -> str | None:
        return _optional_str(v)

    @field_validator("fcm_tokens", mode="before")
    @classmethod
    def _coerce_tokens(cls, v: object) -> list[str]:
        return clean_identifiers(v)

    @classmethod
    def from_document(cls, data: Mapping[str, Any] | None) -> UserRecord:
        return cls.model_validate(dict(data or {}))


class ClientRecord(_Snapshot):
    """Client (organization) directory entry."""

    id: str
    name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: object) -> str | None:
        return _optional_str(v)

    @classmethod
    def from_document(cls, client_id: str, data: Mapping[str, Any] | None) -> ClientRecord:
        return cls.model_validate({**(data or {}), "id": client_id})


@dataclass(frozen=True)
class NotificationRecordRef:
    """Reference to a stored notification record eligible for cleanup."""

    id: str
    created_at_ms: int | None = None


# =============================================================================
# Value objects
# =============================================================================


@dataclass(frozen=True)
class Message:
    """Push message content.

    Attributes:
        title: Notification title shown by the device.
        body: Notification body text.
        data: String key/value payload delivered to the app.
    """

    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DispatchIntent:
    """Decision produced by a reaction rule: who to notify and with what."""

    recipients: tuple[str, ...]
    message: Message

    @property
    def notification_type(self) -> str | None:
        return self.message.data.get("type")


@dataclass(frozen=True)
class MulticastRequest:
    """One multicast send addressed to many endpoints."""

    endpoints: tuple[str, ...]
    title: str
    body: str
    data: dict[str, str]


@dataclass(frozen=True)
class EndpointResult:
    """Per-endpoint outcome reported by the transport."""

    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class MulticastResult:
    """Per-endpoint breakdown of a multicast send, in request order."""

    responses: tuple[EndpointResult, ...]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.responses if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.responses if not r.success)


class DispatchStatus(StrEnum):
    NOOP = "noop"
    SENT = "sent"
    FAILED = "failed"


@dataclass(frozen=True)
class EndpointFailure:
    index: int
    endpoint: str
    error: str | None


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of a dispatch attempt.

    ``result`` is None for NOOP and FAILED outcomes: the caller never sees
    the transport error itself.
    """

    status: DispatchStatus
    endpoint_count: int = 0
    result: MulticastResult | None = None
    failures: tuple[EndpointFailure, ...] = ()

    @property
    def success_count(self) -> int:
        return self.result.success_count if self.result else 0

    @property
    def failure_count(self) -> int:
        return self.result.failure_count if self.result else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "endpoint_count": self.endpoint_count,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
        }


NOOP_OUTCOME = DispatchOutcome(status=DispatchStatus.NOOP)


def stringify_payload(data: Mapping[str, Any] | Sequence[tuple[str, Any]]) -> dict[str, str]:
    """Coerce payload values to strings, dropping None values."""
    items = data.items() if isinstance(data, Mapping) else data
    return {str(k): str(v) for k, v in items if v is not None}
