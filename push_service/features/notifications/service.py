"""Event handlers for task and report changes.

Each handler runs rules → resolver → dispatcher for one change event and
returns the dispatch outcome, or None when nothing was sent. Handlers never
raise: an unexpected error is logged and the event completes without a
notification.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from push_service.core.exceptions import PushServiceError
from push_service.features.notifications import rules
from push_service.features.notifications.models import (
    DispatchIntent,
    DispatchOutcome,
    ReportDocument,
    TaskDocument,
)
from push_service.infra.logging import set_log_context

if TYPE_CHECKING:
    from push_service.features.notifications.context import NotificationContext
    from push_service.features.notifications.events import DocumentCreated, DocumentUpdated

logger = logging.getLogger(__name__)


class NotificationService:
    """Reacts to task/report change events with push notifications."""

    def __init__(self, context: NotificationContext) -> None:
        self._ctx = context

    async def handle_task_created(self, event: DocumentCreated) -> DispatchOutcome | None:
        """Notify the assignees of a new task."""
        set_log_context(trigger="task_created", task_id=event.document_id)
        try:
            if event.data is None:
                logger.error("Task data is missing")
                return None

            task = TaskDocument.from_snapshot(event.document_id, event.data)
            logger.info(
                "New task created",
                extra={"title": task.display_title, "assignees": task.assigned_to},
            )

            intent = rules.task_created(task)
            if intent is None:
                logger.info("No assignees for this task, skipping notification")
                return None

            return await self.deliver(intent)
        except Exception:
            logger.exception("Unexpected error handling task creation")
            return None

    async def handle_task_updated(self, event: DocumentUpdated) -> DispatchOutcome | None:
        """Notify the creator or assignees when a task's status changes."""
        set_log_context(trigger="task_updated", task_id=event.document_id)
        try:
            before = TaskDocument.from_snapshot(event.document_id, event.before)
            after = TaskDocument.from_snapshot(event.document_id, event.after)
            logger.info(
                "Task updated",
                extra={"status_before": before.status, "status_after": after.status},
            )

            if before.status == after.status:
                logger.info("Status not changed, skipping notification")
                return None

            intent = rules.task_updated(before, after)
            if intent is None:
                logger.info(
                    "No notification for this status change",
                    extra={"status_before": before.status, "status_after": after.status},
                )
                return None

            return await self.deliver(intent)
        except Exception:
            logger.exception("Unexpected error handling task update")
            return None

    async def handle_report_created(self, event: DocumentCreated) -> DispatchOutcome | None:
        """Notify every user of the report's client."""
        set_log_context(trigger="report_created", report_id=event.document_id)
        try:
            report = ReportDocument.from_snapshot(event.document_id, event.data)
            if report.client_id is None:
                logger.warning("Report has no client id, skipping notification")
                return None

            try:
                emails = await self._ctx.resolver.client_members(report.client_id)
            except PushServiceError as e:
                logger.error("Failed to look up client users", extra=e.to_dict())
                return None

            if not emails:
                logger.info("No users found for this client", extra={"client_id": report.client_id})
                return None

            client_name = await self._client_name(report.client_id)
            message = rules.report_created(report.id, report.client_id, client_name)
            return await self.deliver(DispatchIntent(recipients=tuple(emails), message=message))
        except Exception:
            logger.exception("Unexpected error handling report creation")
            return None

    async def deliver(self, intent: DispatchIntent) -> DispatchOutcome | None:
        """Resolve an intent's recipients and send its message.

        Returns None when no endpoints were found; the transport is not called.
        """
        endpoints = await self._ctx.resolver.resolve(intent.recipients)
        if not endpoints:
            logger.info(
                "No endpoints found for recipients",
                extra={"notification_type": intent.notification_type},
            )
            return None

        logger.info(
            "Sending notification",
            extra={
                "notification_type": intent.notification_type,
                "endpoint_count": len(endpoints),
            },
        )
        message = intent.message
        return await self._ctx.dispatcher.send(endpoints, message.title, message.body, message.data)

    async def _client_name(self, client_id: str) -> str:
        fallback = self._ctx.settings.fallback_client_name
        try:
            client = await self._ctx.clients.get_client(client_id)
        except Exception:
            logger.exception("Error getting client name", extra={"client_id": client_id})
            return fallback

        if client is None or client.name is None:
            return fallback
        return client.name
