"""Push notifications for task and report changes.

This feature turns database change events and scheduled scans into FCM
multicast pushes:
- Reaction rules decide, per event, who is notified and with what message
- The recipient resolver turns user emails into device tokens
- The dispatcher sends one multicast and logs per-endpoint failures
- Scanners remind assignees of overdue tasks and prune old records

Architecture:
    - Models: TaskDocument, ReportDocument, UserRecord, Message, DispatchOutcome
    - Ports: UserDirectory, ClientDirectory, TaskStore, NotificationRecordStore, PushTransport
    - Context: NotificationContext, passed explicitly to every handler and scan

Example:
    ```python
    context = get_notification_context()
    service = NotificationService(context)
    await service.handle_task_created(DocumentCreated("t-1", {"title": "Fix leak", ...}))
    await check_overdue_tasks(context)
    ```
"""

from push_service.features.notifications.context import NotificationContext
from push_service.features.notifications.dispatcher import PushDispatcher
from push_service.features.notifications.events import DocumentCreated, DocumentUpdated
from push_service.features.notifications.models import (
    DispatchIntent,
    DispatchOutcome,
    DispatchStatus,
    Message,
    NotificationType,
    TaskPriority,
    TaskStatus,
)
from push_service.features.notifications.resolver import RecipientResolver
from push_service.features.notifications.scanners import (
    CleanupResult,
    OverdueScanResult,
    check_overdue_tasks,
    cleanup_old_notifications,
)
from push_service.features.notifications.service import NotificationService

__all__ = [
    "CleanupResult",
    "DispatchIntent",
    "DispatchOutcome",
    "DispatchStatus",
    "DocumentCreated",
    "DocumentUpdated",
    "Message",
    "NotificationContext",
    "NotificationService",
    "NotificationType",
    "OverdueScanResult",
    "PushDispatcher",
    "RecipientResolver",
    "TaskPriority",
    "TaskStatus",
    "check_overdue_tasks",
    "cleanup_old_notifications",
]
