"""Unit tests for the notification reaction rules."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from push_service.features.notifications import rules
from push_service.features.notifications.models import TaskDocument, TaskStatus


def make_task(**data) -> TaskDocument:
    base = {
        "title": "Quarterly audit",
        "createdBy": "creator@x.com",
        "assignedTo": ["a@x.com", "b@x.com"],
    }
    return TaskDocument.from_snapshot("t1", {**base, **data})


@pytest.mark.unit
class TestTaskCreated:
    def test_notifies_assignees_with_priority_marker(self):
        intent = rules.task_created(make_task(priority="high"))

        assert intent is not None
        assert intent.recipients == ("a@x.com", "b@x.com")
        assert intent.message.title == "🔴 New Task Assigned"
        assert intent.message.body == "You have been assigned: Quarterly audit"
        assert intent.message.data == {"taskId": "t1", "type": "task_assigned", "priority": "high"}

    def test_missing_priority_defaults_to_medium(self):
        intent = rules.task_created(make_task())

        assert intent.message.title == "🟡 New Task Assigned"
        assert intent.message.data["priority"] == "medium"

    def test_low_priority(self):
        assert rules.task_created(make_task(priority="low")).message.title == "🟢 New Task Assigned"

    @pytest.mark.parametrize("assignees", [[], None, "a@x.com", [""]])
    def test_no_assignees_sends_nothing(self, assignees):
        assert rules.task_created(make_task(assignedTo=assignees)) is None

    def test_missing_title(self):
        intent = rules.task_created(make_task(title=None))

        assert intent.message.body == "You have been assigned: Untitled"


@pytest.mark.unit
class TestTaskUpdated:
    def test_in_progress_notifies_creator(self):
        intent = rules.task_updated(make_task(status="assigned"), make_task(status="inProgress"))

        assert intent.recipients == ("creator@x.com",)
        assert intent.message.title == "▶️ Task Started"
        assert intent.message.body == "a@x.com started: Quarterly audit"
        assert intent.message.data == {"taskId": "t1", "type": "task_started"}

    def test_in_progress_without_assignees_uses_someone(self):
        intent = rules.task_updated(
            make_task(status="assigned", assignedTo=[]),
            make_task(status="inProgress", assignedTo=[]),
        )

        assert intent.message.body == "Someone started: Quarterly audit"

    def test_pending_review_notifies_creator(self):
        intent = rules.task_updated(make_task(status="inProgress"), make_task(status="pendingReview"))

        assert intent.recipients == ("creator@x.com",)
        assert intent.message.title == "✅ Task Submitted for Review"
        assert intent.message.body == 'Task "Quarterly audit" has been completed and is awaiting your review'
        assert intent.message.data["type"] == "task_submitted"

    def test_completed_notifies_assignees(self):
        intent = rules.task_updated(make_task(status="pendingReview"), make_task(status="completed"))

        assert intent.recipients == ("a@x.com", "b@x.com")
        assert intent.message.title == "🎉 Task Approved!"
        assert intent.message.body == 'Great work! Your task "Quarterly audit" has been approved'
        assert intent.message.data["type"] == "task_approved"

    def test_rejection_with_reason(self):
        intent = rules.task_updated(
            make_task(status="pendingReview"),
            make_task(status="assigned", adminComments="Missing evidence"),
        )

        assert intent.recipients == ("a@x.com", "b@x.com")
        assert intent.message.title == "⚠️ Task Needs Revision"
        assert intent.message.body == 'Your task "Quarterly audit" needs changes. Reason: Missing evidence'
        assert intent.message.data["type"] == "task_rejected"

    def test_rejection_without_reason(self):
        intent = rules.task_updated(make_task(status="pendingReview"), make_task(status="assigned"))

        assert intent.message.body == 'Your task "Quarterly audit" needs changes'

    def test_back_to_assigned_from_in_progress_is_silent(self):
        assert rules.task_updated(make_task(status="inProgress"), make_task(status="assigned")) is None

    def test_incomplete_from_any_status(self):
        for previous in ("assigned", "inProgress", "pendingReview", None):
            intent = rules.task_updated(
                make_task(status=previous),
                make_task(status="incomplete", adminComments="Deadline missed"),
            )

            assert intent.recipients == ("a@x.com", "b@x.com")
            assert intent.message.title == "❌ Task Marked Incomplete"
            assert intent.message.body == (
                'Task "Quarterly audit" has been marked as incomplete. Reason: Deadline missed'
            )

    @pytest.mark.parametrize("status", ["assigned", "inProgress", "completed", "archived", None])
    def test_unchanged_status_is_silent(self, status):
        assert rules.task_updated(make_task(status=status), make_task(status=status)) is None

    def test_unknown_new_status_is_silent(self):
        assert rules.task_updated(make_task(status="assigned"), make_task(status="archived")) is None

    def test_creator_missing_is_silent(self):
        intent = rules.task_updated(
            make_task(status="assigned", createdBy=None),
            make_task(status="inProgress", createdBy=None),
        )

        assert intent is None

    def test_assignees_missing_is_silent(self):
        intent = rules.task_updated(
            make_task(status="pendingReview", assignedTo=[]),
            make_task(status="completed", assignedTo=[]),
        )

        assert intent is None

    def test_rendering_uses_after_snapshot(self):
        intent = rules.task_updated(
            make_task(status="pendingReview", title="Old"),
            make_task(status="completed", title="New"),
        )

        assert '"New"' in intent.message.body


@pytest.mark.unit
class TestTransitionTable:
    def test_every_rule_lookup(self):
        expected = {
            (TaskStatus.ASSIGNED, TaskStatus.IN_PROGRESS): "task_started",
            (TaskStatus.IN_PROGRESS, TaskStatus.PENDING_REVIEW): "task_submitted",
            (TaskStatus.PENDING_REVIEW, TaskStatus.COMPLETED): "task_approved",
            (TaskStatus.PENDING_REVIEW, TaskStatus.ASSIGNED): "task_rejected",
            (TaskStatus.ASSIGNED, TaskStatus.INCOMPLETE): "task_incomplete",
        }
        for (before, after), notification_type in expected.items():
            rule = rules.find_transition_rule(before, after)
            assert rule is not None
            assert rule.notification_type.value == notification_type

    def test_no_rule_for_unknown_after(self):
        assert rules.find_transition_rule(TaskStatus.ASSIGNED, None) is None


@pytest.mark.unit
class TestReportAndOverdue:
    def test_report_created_message(self):
        message = rules.report_created("r1", "acme", "Acme Corp")

        assert message.title == "📋 New Audit Report Available"
        assert message.body == "A new audit report has been created for Acme Corp"
        assert message.data == {"reportId": "r1", "type": "report_created", "clientId": "acme"}

    @pytest.mark.parametrize(
        ("overdue_by", "days"),
        [
            (timedelta(hours=25), 2),
            (timedelta(hours=24), 1),
            (timedelta(minutes=1), 1),
            (timedelta(days=3), 3),
        ],
    )
    def test_days_overdue_rounds_up(self, overdue_by, days):
        now = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)

        assert rules.days_overdue(now - overdue_by, now) == days

    def test_task_overdue_message(self):
        now = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)
        task = make_task(status="inProgress", dueDate=now - timedelta(hours=25))

        intent = rules.task_overdue(task, now)

        assert intent.recipients == ("a@x.com", "b@x.com")
        assert intent.message.title == "⏰ Task Overdue!"
        assert intent.message.body == 'Your task "Quarterly audit" is 2 day(s) overdue'
        assert intent.message.data == {"taskId": "t1", "type": "task_overdue", "daysOverdue": "2"}

    def test_task_overdue_without_assignees(self):
        now = datetime(2025, 3, 10, tzinfo=UTC)
        task = make_task(assignedTo=[], dueDate=now - timedelta(days=1))

        assert rules.task_overdue(task, now) is None
