"""Configuration management commands."""

import json
import sys

import click

from push_service.cli.utils import error, info, success
from push_service.core.settings import get_settings


@click.group(name="config")
def config() -> None:
    """Configuration management commands."""


@config.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
def show(output_format: str) -> None:
    """Display the effective configuration (secrets are never printed)."""
    info("Loading configuration...")

    try:
        settings = get_settings()
    except Exception as e:
        error(f"Failed to load configuration: {e}")
        sys.exit(1)

    config_dict: dict[str, dict[str, object]] = {
        "firebase": {
            "enabled": settings.firebase.enabled,
            "project_id": settings.firebase.project_id,
            "credentials_path": settings.firebase.credentials_path,
            "uses_default_credentials": settings.firebase.uses_default_credentials,
            "users_collection": settings.firebase.users_collection,
            "clients_collection": settings.firebase.clients_collection,
            "tasks_collection": settings.firebase.tasks_collection,
            "notifications_collection": settings.firebase.notifications_collection,
        },
        "notifications": {
            "click_action": settings.notifications.click_action,
            "fallback_client_name": settings.notifications.fallback_client_name,
            "retention_days": settings.notifications.retention_days,
            "overdue_statuses": ",".join(settings.notifications.overdue_statuses),
        },
        "scheduler": {
            "enabled": settings.scheduler.enabled,
            "timezone": settings.scheduler.timezone,
            "overdue_cron": settings.scheduler.overdue_cron,
            "cleanup_cron": settings.scheduler.cleanup_cron,
        },
        "messaging": {
            "enabled": settings.rabbit.enabled,
            "host": settings.rabbit.host,
            "port": settings.rabbit.port,
            "queue_prefix": settings.rabbit.queue_prefix,
        },
        "logging": {
            "level": settings.logging.level,
            "json_logs": settings.logging.json_logs,
        },
    }

    if output_format == "json":
        click.echo(json.dumps(config_dict, indent=2, default=str))
    else:
        click.echo("\n" + "=" * 80)
        click.echo("CONFIGURATION SETTINGS")
        click.echo("=" * 80)

        for section, values in config_dict.items():
            click.echo(f"\n[{section.upper()}]")
            for key, value in values.items():
                click.echo(f"  {key:30} = {value}")

        click.echo("\n" + "=" * 80)

    success("Configuration loaded successfully!")
