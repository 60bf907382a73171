"""Custom exception classes for the push service."""

from __future__ import annotations

from typing import Any


class PushServiceError(Exception):
    """Base push service exception.

    All custom exceptions should inherit from this class.

    Attributes:
        detail: Human-readable error message.
        type: Error type identifier.
        extra: Additional context-specific information about the error.

    Example:
            raise PushServiceError(
            detail="User lookup failed",
            type="directory-lookup-failed",
            extra={"email": "a@x.com"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "push-service-error",
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize push service exception.

        Args:
            detail: Human-readable error message.
            type: Error type identifier.
            extra: Additional context about the error.
        """
        self.detail = detail
        self.type = type
        self.extra = extra or {}
        super().__init__(detail)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging and task results."""
        return {"type": self.type, "detail": self.detail, **self.extra}


class ConfigurationError(PushServiceError):
    """Raised when a required integration is disabled or misconfigured."""

    def __init__(self, detail: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(detail=detail, type="configuration-error", extra=extra)


class DirectoryLookupError(PushServiceError):
    """Raised when a user, client, task or notification-record query fails.

    A missing document is not an error; adapters return None/empty for that.
    """

    def __init__(
        self,
        detail: str,
        collection: str | None = None,
        key: str | None = None,
    ) -> None:
        extra: dict[str, Any] = {}
        if collection:
            extra["collection"] = collection
        if key:
            extra["key"] = key
        super().__init__(detail=detail, type="directory-lookup-failed", extra=extra)
        self.collection = collection
        self.key = key


class TransportError(PushServiceError):
    """Raised when a multicast send fails as a whole."""

    def __init__(self, detail: str, endpoint_count: int | None = None) -> None:
        extra: dict[str, Any] = {}
        if endpoint_count is not None:
            extra["endpoint_count"] = endpoint_count
        super().__init__(detail=detail, type="transport-failed", extra=extra)
        self.endpoint_count = endpoint_count
