"""Background tasks: change-event triggers and scheduled scans.

Run a worker with:
    taskiq worker push_service.tasks.broker:broker
"""

from __future__ import annotations

from .broker import broker, start_taskiq, stop_taskiq
from .scheduler import (
    get_job_status,
    setup_scheduled_jobs,
    start_scheduler,
    stop_scheduler,
)

__all__ = [
    "broker",
    "get_job_status",
    "setup_scheduled_jobs",
    "start_scheduler",
    "stop_scheduler",
    "start_taskiq",
    "stop_taskiq",
]
