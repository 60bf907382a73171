"""Reaction rules: domain events to dispatch intents.

Every function here is pure. A return value of None means "send nothing".

Task status changes are decided by ``TRANSITION_TABLE``, keyed by the new
status. Each key holds an ordered tuple of rules; the first rule whose
``previous`` guard matches the old status wins. A status missing from the
table, or with no matching rule, produces no notification.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from push_service.features.notifications.models import (
    DispatchIntent,
    Message,
    NotificationType,
    TaskDocument,
    TaskStatus,
)

ONE_DAY = timedelta(days=1)


class Audience(StrEnum):
    """Who receives a task notification."""

    CREATOR = "creator"
    ASSIGNEES = "assignees"


@dataclass(frozen=True)
class TransitionRule:
    """One row of the status transition table.

    Attributes:
        notification_type: Value sent as ``data.type``.
        title: Notification title.
        body: Builds the body from the task after the update.
        audience: Creator or assignees of the task.
        previous: Required status before the update; None matches any.
        with_reason: Append the admin comment, when present, as a reason.
    """

    notification_type: NotificationType
    title: str
    body: Callable[[TaskDocument], str]
    audience: Audience
    previous: TaskStatus | None = None
    with_reason: bool = False

    def matches(self, before: TaskStatus | None) -> bool:
        return self.previous is None or self.previous == before

    def render(self, task: TaskDocument) -> Message:
        body = self.body(task)
        if self.with_reason and task.admin_comments:
            body += f". Reason: {task.admin_comments}"
        return Message(
            title=self.title,
            body=body,
            data={"taskId": task.id, "type": self.notification_type.value},
        )

    def recipients(self, task: TaskDocument) -> tuple[str, ...]:
        if self.audience is Audience.CREATOR:
            return tuple(task.creator)
        return tuple(task.assigned_to)


def _started_by(task: TaskDocument) -> str:
    return task.assigned_to[0] if task.assigned_to else "Someone"


TRANSITION_TABLE: Mapping[TaskStatus, tuple[TransitionRule, ...]] = {
    TaskStatus.IN_PROGRESS: (
        TransitionRule(
            notification_type=NotificationType.TASK_STARTED,
            title="▶️ Task Started",
            body=lambda t: f"{_started_by(t)} started: {t.display_title}",
            audience=Audience.CREATOR,
        ),
    ),
    TaskStatus.PENDING_REVIEW: (
        TransitionRule(
            notification_type=NotificationType.TASK_SUBMITTED,
            title="✅ Task Submitted for Review",
            body=lambda t: (
                f'Task "{t.display_title}" has been completed and is awaiting your review'
            ),
            audience=Audience.CREATOR,
        ),
    ),
    TaskStatus.COMPLETED: (
        TransitionRule(
            notification_type=NotificationType.TASK_APPROVED,
            title="🎉 Task Approved!",
            body=lambda t: f'Great work! Your task "{t.display_title}" has been approved',
            audience=Audience.ASSIGNEES,
        ),
    ),
    # Moving back to assigned is only a rejection when it leaves review
    TaskStatus.ASSIGNED: (
        TransitionRule(
            notification_type=NotificationType.TASK_REJECTED,
            title="⚠️ Task Needs Revision",
            body=lambda t: f'Your task "{t.display_title}" needs changes',
            audience=Audience.ASSIGNEES,
            previous=TaskStatus.PENDING_REVIEW,
            with_reason=True,
        ),
    ),
    TaskStatus.INCOMPLETE: (
        TransitionRule(
            notification_type=NotificationType.TASK_INCOMPLETE,
            title="❌ Task Marked Incomplete",
            body=lambda t: f'Task "{t.display_title}" has been marked as incomplete',
            audience=Audience.ASSIGNEES,
            with_reason=True,
        ),
    ),
}


def find_transition_rule(
    before: TaskStatus | None,
    after: TaskStatus | None,
) -> TransitionRule | None:
    """Look up the rule for a status change, or None if nothing applies."""
    if after is None:
        return None
    for rule in TRANSITION_TABLE.get(after, ()):
        if rule.matches(before):
            return rule
    return None


def task_created(task: TaskDocument) -> DispatchIntent | None:
    """Notify assignees of a newly created task."""
    if not task.assigned_to:
        return None

    message = Message(
        title=f"{task.priority.marker} New Task Assigned",
        body=f"You have been assigned: {task.display_title}",
        data={
            "taskId": task.id,
            "type": NotificationType.TASK_ASSIGNED.value,
            "priority": task.priority.value,
        },
    )
    return DispatchIntent(recipients=tuple(task.assigned_to), message=message)


def task_updated(before: TaskDocument, after: TaskDocument) -> DispatchIntent | None:
    """Decide the notification for a task update.

    Only status changes notify; the raw status strings are compared so that
    an unchanged status never dispatches, whatever its value.
    """
    if before.status == after.status:
        return None

    rule = find_transition_rule(before.task_status, after.task_status)
    if rule is None:
        return None

    recipients = rule.recipients(after)
    if not recipients:
        return None

    return DispatchIntent(recipients=recipients, message=rule.render(after))


def report_created(report_id: str, client_id: str, client_name: str) -> Message:
    """Message announcing a new audit report to a client's users."""
    return Message(
        title="📋 New Audit Report Available",
        body=f"A new audit report has been created for {client_name}",
        data={
            "reportId": report_id,
            "type": NotificationType.REPORT_CREATED.value,
            "clientId": client_id,
        },
    )


def days_overdue(due: datetime, now: datetime) -> int:
    """Whole days past due, rounded up (25 hours overdue is 2 days)."""
    return math.ceil((now - due) / ONE_DAY)


def task_overdue(task: TaskDocument, now: datetime) -> DispatchIntent | None:
    """Remind assignees of an overdue task."""
    if not task.assigned_to or task.due_date is None:
        return None

    days = days_overdue(task.due_date, now)
    message = Message(
        title="⏰ Task Overdue!",
        body=f'Your task "{task.display_title}" is {days} day(s) overdue',
        data={
            "taskId": task.id,
            "type": NotificationType.TASK_OVERDUE.value,
            "daysOverdue": str(days),
        },
    )
    return DispatchIntent(recipients=tuple(task.assigned_to), message=message)
