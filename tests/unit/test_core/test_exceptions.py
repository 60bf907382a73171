"""Unit tests for push service exceptions."""

from __future__ import annotations

import pytest

from push_service.core.exceptions import (
    ConfigurationError,
    DirectoryLookupError,
    PushServiceError,
    TransportError,
)


@pytest.mark.unit
class TestExceptions:
    def test_base_error(self):
        error = PushServiceError("Something failed", extra={"key": "value"})

        assert str(error) == "Something failed"
        assert error.to_dict() == {"type": "push-service-error", "detail": "Something failed", "key": "value"}

    def test_directory_lookup_error(self):
        error = DirectoryLookupError("User lookup failed", collection="users", key="a@x.com")

        assert isinstance(error, PushServiceError)
        assert error.type == "directory-lookup-failed"
        assert error.extra == {"collection": "users", "key": "a@x.com"}

    def test_directory_lookup_error_without_context(self):
        assert DirectoryLookupError("failed").extra == {}

    def test_transport_error(self):
        error = TransportError("FCM multicast failed", endpoint_count=3)

        assert error.type == "transport-failed"
        assert error.endpoint_count == 3
        assert error.to_dict()["endpoint_count"] == 3

    def test_configuration_error(self):
        error = ConfigurationError("Firebase disabled")

        assert error.type == "configuration-error"
