"""Notification commands.

This module provides CLI commands for operating the notification core
directly, outside the task worker:
- Run the overdue scan or the record cleanup now
- Resolve users to device endpoints
- Send a test notification
"""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import click

from push_service.cli.utils import coro, error, header, info, key_values, success, warning
from push_service.core.exceptions import PushServiceError

if TYPE_CHECKING:
    from push_service.features.notifications.context import NotificationContext


def _load_context() -> NotificationContext:
    from push_service.features.notifications.dependencies import get_notification_context

    try:
        return get_notification_context()
    except PushServiceError as e:
        error(f"Notification backend unavailable: {e.detail}")
        sys.exit(1)


def _format_created_at(created_at_ms: int | None) -> str:
    if created_at_ms is None:
        return "unknown"
    return datetime.fromtimestamp(created_at_ms / 1000, tz=UTC).isoformat()


def _print_summary(summary: dict[str, Any], output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps(summary, indent=2, default=str))
        return
    key_values(summary)


format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)


@click.group(name="notify")
def notify() -> None:
    """Push notification operations."""


@notify.command(name="overdue")
@format_option
@coro
async def overdue(output_format: str) -> None:
    """Run the overdue task reminder scan now."""
    from push_service.features.notifications.scanners import check_overdue_tasks

    header("Overdue Task Scan")
    result = await check_overdue_tasks(_load_context())
    _print_summary(result.to_dict(), output_format)

    if result.status != "success":
        error(f"Overdue scan failed: {result.error}")
        sys.exit(1)
    success(f"Notified {result.notified_count} of {result.overdue_count} overdue tasks")


@notify.command(name="cleanup")
@click.option(
    "--retention-days",
    type=click.IntRange(min=1),
    default=None,
    help="Override the configured retention window",
)
@click.option("--dry-run", is_flag=True, help="Count matching records without deleting")
@format_option
@coro
async def cleanup(retention_days: int | None, dry_run: bool, output_format: str) -> None:
    """Delete notification records older than the retention window.

    \b
    Examples:
      push-service notify cleanup
      push-service notify cleanup --retention-days 7 --dry-run
    """
    from push_service.features.notifications.scanners import cleanup_old_notifications

    header("Notification Cleanup")
    result = await cleanup_old_notifications(
        _load_context(),
        retention_days=retention_days,
        dry_run=dry_run,
    )
    _print_summary(result.to_dict(), output_format)

    if result.status != "success":
        error(f"Cleanup failed: {result.error}")
        sys.exit(1)
    if dry_run:
        if output_format == "table" and result.records:
            key_values({record.id: _format_created_at(record.created_at_ms) for record in result.records})
        warning(f"Dry run: {result.deleted_count} records would be deleted")
    else:
        success(f"Deleted {result.deleted_count} old notifications")


@notify.command(name="resolve")
@click.argument("emails", nargs=-1, required=True)
@coro
async def resolve(emails: tuple[str, ...]) -> None:
    """Resolve users to their registered device endpoints (no send)."""
    context = _load_context()
    endpoints = await context.resolver.resolve(list(emails))

    info(f"Resolved {len(emails)} users to {len(endpoints)} endpoints")
    for endpoint in sorted(endpoints):
        click.echo(f"  {endpoint[:12]}…")

    if not endpoints:
        warning("No endpoints found")


@notify.command(name="test-send")
@click.argument("emails", nargs=-1, required=True)
@click.option("--title", default="Test notification", show_default=True, help="Notification title")
@click.option("--body", default="This is a test notification", show_default=True, help="Notification body")
@coro
async def test_send(emails: tuple[str, ...], title: str, body: str) -> None:
    """Send a test notification to the given users."""
    from push_service.features.notifications.models import DispatchStatus

    context = _load_context()
    endpoints = await context.resolver.resolve(list(emails))
    if not endpoints:
        warning("No endpoints found, nothing sent")
        return

    outcome = await context.dispatcher.send(endpoints, title, body, {"type": "test"})
    key_values(outcome.to_dict())

    if outcome.status is DispatchStatus.FAILED:
        error("Sending failed")
        sys.exit(1)
    for failure in outcome.failures:
        warning(f"Endpoint {failure.index} failed: {failure.error}")
    success(f"Sent to {outcome.success_count} of {outcome.endpoint_count} endpoints")
