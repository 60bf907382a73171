"""Scheduled scans: overdue-task reminders and notification-record cleanup."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from push_service.features.notifications import rules
from push_service.features.notifications.models import DispatchStatus
from push_service.features.notifications.service import NotificationService
from push_service.infra.logging import set_log_context

if TYPE_CHECKING:
    from push_service.features.notifications.context import NotificationContext
    from push_service.features.notifications.models import NotificationRecordRef, TaskDocument

logger = logging.getLogger(__name__)


@dataclass
class OverdueScanResult:
    """Summary of one overdue scan."""

    status: str = "success"
    overdue_count: int = 0
    notified_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status,
            "overdue_count": self.overdue_count,
            "notified_count": self.notified_count,
            "skipped_count": self.skipped_count,
            "failed_count": self.failed_count,
        }
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class CleanupResult:
    """Summary of one cleanup run."""

    status: str = "success"
    cutoff_ms: int = 0
    deleted_count: int = 0
    dry_run: bool = False
    error: str | None = None
    records: list[NotificationRecordRef] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status,
            "cutoff_ms": self.cutoff_ms,
            "deleted_count": self.deleted_count,
            "dry_run": self.dry_run,
        }
        if self.dry_run:
            result["record_ids"] = [record.id for record in self.records]
        if self.error:
            result["error"] = self.error
        return result


async def check_overdue_tasks(
    context: NotificationContext,
    now: datetime | None = None,
) -> OverdueScanResult:
    """Send a reminder to the assignees of every overdue open task.

    Tasks are processed concurrently and all of them are awaited before the
    scan returns. A failure on one task is logged and does not affect the
    others; a failure of the scan itself is logged and reported in the result.
    """
    set_log_context(trigger="overdue_scan")
    now = now or datetime.now(UTC)
    result = OverdueScanResult()
    logger.info("Checking overdue tasks", extra={"now": now.isoformat()})

    try:
        tasks = await context.tasks.find_overdue(now, context.settings.overdue_statuses)
        result.overdue_count = len(tasks)

        if not tasks:
            logger.info("No overdue tasks found")
            return result

        logger.info("Found overdue tasks", extra={"count": len(tasks)})

        service = NotificationService(context)
        outcomes = await asyncio.gather(*(_remind(service, task, now) for task in tasks))
    except Exception as e:
        logger.exception("Error checking overdue tasks")
        result.status = "error"
        result.error = str(e)
        return result

    for outcome in outcomes:
        if outcome == "notified":
            result.notified_count += 1
        elif outcome == "failed":
            result.failed_count += 1
        else:
            result.skipped_count += 1

    logger.info("Overdue task notifications sent", extra=result.to_dict())
    return result


async def _remind(service: NotificationService, task: TaskDocument, now: datetime) -> str:
    set_log_context(task_id=task.id)
    try:
        intent = rules.task_overdue(task, now)
        if intent is None:
            logger.info("No assignees for overdue task", extra={"title": task.display_title})
            return "skipped"

        outcome = await service.deliver(intent)
        if outcome is None:
            return "skipped"
        if outcome.status is DispatchStatus.FAILED:
            return "failed"
        return "notified"
    except Exception:
        logger.exception("Failed to process overdue task")
        return "failed"


async def cleanup_old_notifications(
    context: NotificationContext,
    now: datetime | None = None,
    retention_days: int | None = None,
    dry_run: bool = False,
) -> CleanupResult:
    """Delete notification records older than the retention window.

    All matching records are deleted in one atomic batch. Nothing is
    committed when no record matches.
    """
    set_log_context(trigger="notification_cleanup")
    now = now or datetime.now(UTC)
    days = retention_days if retention_days is not None else context.settings.retention_days
    cutoff_ms = int((now - timedelta(days=days)).timestamp() * 1000)
    result = CleanupResult(cutoff_ms=cutoff_ms, dry_run=dry_run)

    logger.info("Cleaning up old notifications", extra={"retention_days": days})

    try:
        records = await context.records.find_created_before(cutoff_ms)
        result.records = list(records)

        if not records:
            logger.info("No old notifications to delete")
            return result

        logger.info("Found old notifications to delete", extra={"count": len(records)})

        if dry_run:
            result.deleted_count = len(records)
            return result

        await context.records.delete_batch(records)
        result.deleted_count = len(records)
        logger.info("Deleted old notifications", extra={"count": len(records)})
    except Exception as e:
        logger.exception("Error cleaning up notifications")
        result.status = "error"
        result.error = str(e)
        result.deleted_count = 0

    return result
