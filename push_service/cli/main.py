"""Main CLI entry point for push-service management commands."""

import click

from push_service.cli.commands import config, notify, scheduler
from push_service.infra.logging.config import setup_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="push-service")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Push Service CLI - Operate the task/report push notification engine.

    \b
    Command Groups:
      notify     Run scans, resolve users and send test notifications
      scheduler  Scheduled job management
      config     Configuration management

    \b
    Quick Start:
      push-service config show                 # Check settings
      push-service notify resolve a@example.com
      push-service notify cleanup --dry-run
      push-service scheduler run               # Run the daily/weekly scans
    """
    ctx.ensure_object(dict)


cli.add_command(notify.notify)
cli.add_command(scheduler.scheduler)
cli.add_command(config.config)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
