"""Logging configuration setup.

Provides logging configuration using:
- dictConfig for flexible configuration
- QueueHandler + QueueListener for non-blocking I/O
- ContextInjectingFilter for automatic context propagation
- All handlers on root logger (child loggers propagate)
- JSONL format for machine parsing
"""

from __future__ import annotations

import atexit
import logging
import logging.config
import time
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import TYPE_CHECKING, Any

from push_service.infra.logging.context import ContextInjectingFilter

_log_queue: Queue[logging.LogRecord] | None = None
_listener: QueueListener | None = None
logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

_TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

if TYPE_CHECKING:
    from push_service.core.settings.logs import LoggingSettings


def complete() -> None:
    """Wait (up to 5 seconds) for all queued log records to be written."""
    if _log_queue is None or _listener is None:
        return

    max_wait = 5.0
    start = time.time()

    while not _log_queue.empty() and (time.time() - start) < max_wait:
        time.sleep(0.01)

    # Give a bit more time for last records to be written
    time.sleep(0.05)


def shutdown() -> None:
    """Flush pending records and stop the QueueListener.

    Registered with atexit when the listener starts.
    """
    global _log_queue, _listener

    if _listener is not None:
        complete()
        _listener.stop()
        _listener = None

    _log_queue = None


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from push_service.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = settings_obj.to_logging_kwargs()
    if configure_kwargs:
        log_config = {**log_config, **configure_kwargs}

    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    console_level: str | None = None,
    file_level: str | None = None,
    file_path: str | Path | None = None,
    json_logs: bool = True,
    console_enabled: bool = True,
    include_context: bool = True,
    capture_warnings: bool = True,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    service_name: str = "push-service",
    **kwargs: Any,
) -> None:
    """Configure logging with dictConfig and QueueHandler pattern.

    All handlers are attached to a QueueListener; the root logger gets a
    single QueueHandler and application loggers propagate up to it.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        console_level: Console handler level. If None, uses log_level.
        file_level: File handler level. If None, uses log_level.
        file_path: Path to log file. None disables file logging.
        json_logs: Enable JSONL (JSON Lines) structured logging.
        console_enabled: Enable console/stderr logging.
        include_context: Enable ContextInjectingFilter for auto context.
        capture_warnings: Forward Python warnings to logging system.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
        service_name: Static service field added to JSON records.
        **kwargs: Ignored extra settings.

    Example:
        from push_service.core.settings import get_logging_settings
        configure_logging(**get_logging_settings().to_logging_kwargs())
    """
    if kwargs:
        logger.debug("Unused logging kwargs supplied: %s", ", ".join(sorted(kwargs.keys())))

    if capture_warnings:
        logging.captureWarnings(True)

    path = Path(file_path) if file_path else None
    if path:
        path.parent.mkdir(parents=True, exist_ok=True)

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        # Handlers are created manually and attached to the QueueListener
        "root": {
            "level": log_level.upper(),
            "handlers": [],
        },
        "loggers": {
            # google-auth and grpc are chatty at INFO
            "google": {"level": "WARNING"},
            "grpc": {"level": "WARNING"},
            "apscheduler": {"level": "INFO"},
        },
    }

    logging.config.dictConfig(logging_config)

    _setup_queue_logging(
        console_enabled=console_enabled,
        console_level=console_level or log_level,
        file_path=path,
        file_level=file_level or log_level,
        file_max_bytes=file_max_bytes,
        file_backup_count=file_backup_count,
        json_logs=json_logs,
        service_name=service_name,
        include_context=include_context,
    )


def _build_formatter(json_logs: bool, service_name: str) -> logging.Formatter:
    from push_service.infra.logging.formatters import JSONFormatter

    if json_logs:
        return JSONFormatter(
            fmt_keys={"level": "levelname", "logger": "name", "message": "message"},
            static={"service": service_name},
        )
    return logging.Formatter(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)


def _setup_queue_logging(
    console_enabled: bool,
    console_level: str,
    file_path: Path | None,
    file_level: str,
    file_max_bytes: int,
    file_backup_count: int,
    json_logs: bool,
    service_name: str,
    include_context: bool = True,
) -> None:
    """Set up QueueHandler + QueueListener for non-blocking logging."""
    global _log_queue, _listener

    # Replace any listener from a previous configure call
    if _listener is not None:
        _listener.stop()
        _listener = None

    _log_queue = Queue()
    handlers: list[logging.Handler] = []

    if console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(_build_formatter(json_logs, service_name))
        handlers.append(console_handler)

    if file_path:
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=file_max_bytes,
            backupCount=file_backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(_build_formatter(json_logs, service_name))
        handlers.append(file_handler)

    if handlers:
        _listener = QueueListener(_log_queue, *handlers, respect_handler_level=True)
        _listener.start()
        atexit.register(shutdown)

    queue_handler = QueueHandler(_log_queue)
    # Runs in the emitting thread; contextvars are not visible to the listener
    if include_context:
        queue_handler.addFilter(ContextInjectingFilter())

    root = logging.getLogger()
    root.addHandler(queue_handler)
