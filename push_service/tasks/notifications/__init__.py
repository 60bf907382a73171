"""Push notification trigger and scan tasks."""

from __future__ import annotations

from .tasks import (
    check_overdue_tasks,
    cleanup_old_notifications,
    on_report_created,
    on_task_created,
    on_task_updated,
)

__all__ = [
    "check_overdue_tasks",
    "cleanup_old_notifications",
    "on_report_created",
    "on_task_created",
    "on_task_updated",
]
