"""Notification task definitions.

This module provides:
- Trigger tasks for task created/updated and report created events
- The daily overdue-task reminder scan
- The weekly notification-record cleanup

Every task returns a summary dict and never raises; failures are logged and
reported with ``"status": "error"``.

Example:
    from push_service.tasks.notifications.tasks import on_task_created

    await on_task_created.kiq(task_id="t1", data={"title": "Audit", "assignedTo": ["a@x.com"]})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from push_service.features.notifications import scanners
from push_service.features.notifications.dependencies import get_notification_context
from push_service.features.notifications.events import DocumentCreated, DocumentUpdated
from push_service.features.notifications.service import NotificationService
from push_service.infra.logging import clear_log_context
from push_service.tasks.broker import broker

if TYPE_CHECKING:
    from push_service.features.notifications.context import NotificationContext
    from push_service.features.notifications.models import DispatchOutcome

logger = logging.getLogger(__name__)


def _load_context() -> NotificationContext | None:
    try:
        return get_notification_context()
    except Exception:
        logger.exception("Notification context unavailable")
        return None


def _unavailable() -> dict[str, Any]:
    return {"status": "error", "error": "notification context unavailable"}


def _summarize(outcome: DispatchOutcome | None) -> dict[str, Any]:
    if outcome is None:
        return {"status": "skipped"}
    return outcome.to_dict()


@broker.task()
async def on_task_created(task_id: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Notify the assignees of a newly created task."""
    clear_log_context()
    context = _load_context()
    if context is None:
        return _unavailable()

    outcome = await NotificationService(context).handle_task_created(DocumentCreated(task_id, data))
    return _summarize(outcome)


@broker.task()
async def on_task_updated(
    task_id: str,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Notify the creator or assignees after a task status change."""
    clear_log_context()
    context = _load_context()
    if context is None:
        return _unavailable()

    event = DocumentUpdated(task_id, before=before, after=after)
    outcome = await NotificationService(context).handle_task_updated(event)
    return _summarize(outcome)


@broker.task()
async def on_report_created(report_id: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Notify every user of the report's client."""
    clear_log_context()
    context = _load_context()
    if context is None:
        return _unavailable()

    outcome = await NotificationService(context).handle_report_created(DocumentCreated(report_id, data))
    return _summarize(outcome)


@broker.task()
async def check_overdue_tasks() -> dict[str, Any]:
    """Remind assignees of overdue open tasks.

    Scheduled: Daily at 09:00 Asia/Kolkata (via APScheduler).
    """
    clear_log_context()
    context = _load_context()
    if context is None:
        return _unavailable()

    result = await scanners.check_overdue_tasks(context)
    return result.to_dict()


@broker.task()
async def cleanup_old_notifications(
    retention_days: int | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Delete notification records past the retention window.

    Scheduled: Sundays at 00:00 Asia/Kolkata (via APScheduler).
    """
    clear_log_context()
    context = _load_context()
    if context is None:
        return _unavailable()

    result = await scanners.cleanup_old_notifications(
        context,
        retention_days=retention_days,
        dry_run=dry_run,
    )
    return result.to_dict()
