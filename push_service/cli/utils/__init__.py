"""CLI utilities for running async operations and formatting output."""

from push_service.cli.utils.async_runner import coro
from push_service.cli.utils.formatters import (
    error,
    header,
    info,
    key_values,
    success,
    warning,
)

__all__ = [
    "coro",
    "error",
    "info",
    "success",
    "warning",
    "header",
    "key_values",
]
