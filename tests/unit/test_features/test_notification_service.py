"""Scenario tests for NotificationService event handlers."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from push_service.features.notifications.events import DocumentCreated, DocumentUpdated
from push_service.features.notifications.models import DispatchStatus
from push_service.features.notifications.service import NotificationService
from push_service.infra.logging import get_log_context
from tests.fakes import FakeClientDirectory, FakeTransport, FakeUserDirectory, transport_failure


@pytest.mark.unit
class TestTaskCreated:
    @pytest.mark.asyncio
    async def test_new_task_dispatches_to_union_of_assignee_tokens(self, service, transport):
        event = DocumentCreated(
            "t1",
            {"title": "Fix leak", "assignedTo": ["a@x.com", "b@x.com"], "createdBy": "creator@x.com"},
        )

        outcome = await service.handle_task_created(event)

        assert outcome.status is DispatchStatus.SENT
        assert len(transport.requests) == 1
        request = transport.last
        assert "New Task Assigned" in request.title
        assert request.title.startswith("🟡")
        assert request.body == "You have been assigned: Fix leak"
        assert request.data["type"] == "task_assigned"
        assert request.data["priority"] == "medium"
        assert request.data["taskId"] == "t1"
        assert set(request.endpoints) == {"tok-a1", "tok-a2", "tok-b"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("assignees", [[], None, "a@x.com", ["", 3]])
    async def test_no_valid_assignees_never_dispatches(self, service, transport, users, assignees):
        outcome = await service.handle_task_created(DocumentCreated("t1", {"assignedTo": assignees}))

        assert outcome is None
        assert transport.requests == []
        assert users.email_lookups == []

    @pytest.mark.asyncio
    async def test_assignees_without_tokens_never_dispatches(self, service, transport):
        outcome = await service.handle_task_created(
            DocumentCreated("t1", {"assignedTo": ["c@x.com", "nobody@x.com"]})
        )

        assert outcome is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_missing_snapshot_is_ignored(self, service, transport):
        assert await service.handle_task_created(DocumentCreated("t1", None)) is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_binds_log_context(self, service):
        await service.handle_task_created(DocumentCreated("t1", {"assignedTo": []}))

        assert get_log_context() == {"trigger": "task_created", "task_id": "t1"}

    @pytest.mark.asyncio
    async def test_transport_rejection_completes_without_raising(self, context):
        context.transport = FakeTransport(error=transport_failure())
        outcome = await NotificationService(context).handle_task_created(
            DocumentCreated("t1", {"assignedTo": ["a@x.com"]})
        )

        assert outcome.status is DispatchStatus.FAILED
        assert outcome.result is None


@pytest.mark.unit
class TestTaskUpdated:
    @pytest.mark.asyncio
    async def test_completed_dispatches_approval_to_assignee(self, service, transport):
        event = DocumentUpdated(
            "t1",
            before={"status": "assigned", "assignedTo": ["a@x.com"], "title": "Fix leak"},
            after={"status": "completed", "assignedTo": ["a@x.com"], "title": "Fix leak"},
        )

        outcome = await service.handle_task_updated(event)

        assert outcome.status is DispatchStatus.SENT
        assert transport.last.data["type"] == "task_approved"
        assert set(transport.last.endpoints) == {"tok-a1", "tok-a2"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["assigned", "inProgress", "pendingReview", "completed", "incomplete"])
    async def test_same_status_never_dispatches(self, service, transport, status):
        data = {"status": status, "assignedTo": ["a@x.com"], "createdBy": "creator@x.com"}

        outcome = await service.handle_task_updated(DocumentUpdated("t1", before=data, after=dict(data)))

        assert outcome is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_rejection_goes_to_assignees(self, service, transport):
        event = DocumentUpdated(
            "t1",
            before={"status": "pendingReview", "assignedTo": ["b@x.com"], "createdBy": "creator@x.com"},
            after={
                "status": "assigned",
                "assignedTo": ["b@x.com"],
                "createdBy": "creator@x.com",
                "adminComments": "Add photos",
            },
        )

        await service.handle_task_updated(event)

        assert transport.last.data["type"] == "task_rejected"
        assert transport.last.body.endswith(". Reason: Add photos")
        assert set(transport.last.endpoints) == {"tok-a2", "tok-b"}

    @pytest.mark.asyncio
    async def test_reassignment_without_review_is_silent(self, service, transport):
        event = DocumentUpdated(
            "t1",
            before={"status": "inProgress", "assignedTo": ["a@x.com"]},
            after={"status": "assigned", "assignedTo": ["a@x.com"]},
        )

        assert await service.handle_task_updated(event) is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_started_goes_to_creator(self, service, transport):
        event = DocumentUpdated(
            "t1",
            before={"status": "assigned", "assignedTo": ["a@x.com"], "createdBy": "creator@x.com"},
            after={"status": "inProgress", "assignedTo": ["a@x.com"], "createdBy": "creator@x.com"},
        )

        await service.handle_task_updated(event)

        assert transport.last.endpoints == ("tok-creator",)
        assert transport.last.data["type"] == "task_started"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, context, caplog):
        context.resolver.resolve = AsyncMock(side_effect=RuntimeError("boom"))
        event = DocumentUpdated(
            "t1",
            before={"status": "pendingReview", "assignedTo": ["a@x.com"]},
            after={"status": "completed", "assignedTo": ["a@x.com"]},
        )

        with caplog.at_level("ERROR"):
            outcome = await NotificationService(context).handle_task_updated(event)

        assert outcome is None
        assert "Unexpected error handling task update" in caplog.text


@pytest.mark.unit
class TestReportCreated:
    @pytest.mark.asyncio
    async def test_dispatches_to_all_client_users(self, service, transport):
        outcome = await service.handle_report_created(DocumentCreated("r1", {"clientId": "acme"}))

        assert outcome.status is DispatchStatus.SENT
        assert set(transport.last.endpoints) == {"tok-u1", "tok-u2"}
        assert transport.last.body == "A new audit report has been created for Acme Corp"
        assert transport.last.data["reportId"] == "r1"
        assert transport.last.data["clientId"] == "acme"
        assert transport.last.data["type"] == "report_created"

    @pytest.mark.asyncio
    async def test_missing_client_document_uses_fallback_name(self, context, transport):
        users = FakeUserDirectory()
        users.add("x@c1.com", ["tok-x"], client_id="C1")
        users.add("y@c1.com", ["tok-y"], client_id="C1")
        context.users = users
        context.clients = FakeClientDirectory({})

        outcome = await NotificationService(context).handle_report_created(
            DocumentCreated("r1", {"clientId": "C1"})
        )

        assert outcome.status is DispatchStatus.SENT
        assert transport.last.body == "A new audit report has been created for Your company"
        assert set(transport.last.endpoints) == {"tok-x", "tok-y"}

    @pytest.mark.asyncio
    async def test_client_lookup_failure_uses_fallback_name(self, context, transport):
        context.clients = FakeClientDirectory(fail=True)

        await NotificationService(context).handle_report_created(DocumentCreated("r1", {"clientId": "acme"}))

        assert transport.last.body.endswith("for Your company")

    @pytest.mark.asyncio
    async def test_client_without_name_uses_fallback_name(self, context, transport):
        context.clients = FakeClientDirectory({"acme": None})

        await NotificationService(context).handle_report_created(DocumentCreated("r1", {"clientId": "acme"}))

        assert transport.last.body.endswith("for Your company")

    @pytest.mark.asyncio
    async def test_no_client_id_is_silent(self, service, transport, users):
        assert await service.handle_report_created(DocumentCreated("r1", {})) is None
        assert users.client_lookups == []
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_client_without_users_is_silent(self, service, transport):
        assert await service.handle_report_created(DocumentCreated("r1", {"clientId": "empty"})) is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_member_lookup_failure_is_silent(self, context, transport):
        context.users = FakeUserDirectory(fail_client_lookup=True)

        outcome = await NotificationService(context).handle_report_created(
            DocumentCreated("r1", {"clientId": "acme"})
        )

        assert outcome is None
        assert transport.requests == []
