"""Logging infrastructure.

Provides structured logging with:
- JSONL format for log aggregation
- Automatic context injection (trigger, task_id, report_id, ...)
- QueueHandler + QueueListener for non-blocking I/O
- Per-handler log levels (console vs file)

Basic usage:
    from push_service.infra.logging import set_log_context
    import logging

    logger = logging.getLogger(__name__)

    set_log_context(trigger="task_created", task_id="t-1")
    logger.info("Dispatching")  # Automatically includes trigger and task_id
"""

from push_service.infra.logging.config import (
    complete,
    configure_logging,
    setup_logging,
    shutdown,
)
from push_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from push_service.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "complete",
    "configure_logging",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
