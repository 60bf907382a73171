"""Context management for structured logging.

Provides automatic context injection into log records using contextvars,
so the trigger name and document id bound at the start of a unit of work
appear on every record emitted while handling it.

This approach is:
- Async-safe: Works correctly across async/await boundaries
- Isolated: Each asyncio task gets its own copy of the context
- Implicit: No need to modify existing logging calls
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

# Each async task gets its own copy automatically
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Set logging context for current async task/thread.

    Args:
        **kwargs: Key-value pairs to add to logging context.
            Common examples: trigger, task_id, report_id

    Example:
        ```python
        set_log_context(trigger="task_updated", task_id="t-1")
        logger.info("Status changed")  # Includes trigger and task_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for current async task/thread.

    Useful in tests or long-running jobs that process several items.
    """
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Logging filter that automatically injects context into LogRecord.

    Attached to the root QueueHandler so records from every logger pass through it.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject context into log record.

        Args:
            record: The log record to enhance with context.

        Returns:
            True (always allow the record to be logged).
        """
        context = _log_context.get()

        for key, value in context.items():
            # Don't overwrite existing attributes
            if not hasattr(record, key):
                setattr(record, key, value)

        return True

