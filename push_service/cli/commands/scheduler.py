"""Scheduler management commands.

This module provides CLI commands for the APScheduler scans:
- List scheduled jobs
- Run the scheduler in the foreground
"""

from __future__ import annotations

import asyncio
import json
import sys

import click

from push_service.cli.utils import coro, error, header, info, success, warning


@click.group(name="scheduler")
def scheduler() -> None:
    """Scheduled job management commands."""


@scheduler.command(name="list")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def list_jobs(output_format: str) -> None:
    """List the scheduled scans and their triggers."""
    from push_service.tasks.scheduler import get_job_status, setup_scheduled_jobs

    header("Scheduled Jobs")
    setup_scheduled_jobs()
    jobs = get_job_status()

    if not jobs:
        info("No scheduled jobs found")
        return

    if output_format == "json":
        click.echo(json.dumps(jobs, indent=2))
        return

    id_width = max(len(j["id"]) for j in jobs) + 2
    name_width = max(len(j["name"]) for j in jobs) + 2

    click.echo()
    click.echo(f"{'ID':<{id_width}} {'Name':<{name_width}} {'Trigger'}")
    click.echo("-" * (id_width + name_width + 30))
    for job in jobs:
        click.echo(f"{job['id']:<{id_width}} {job['name']:<{name_width}} {job['trigger']}")

    click.echo()
    success(f"Total: {len(jobs)} scheduled jobs")


@scheduler.command(name="run")
@coro
async def run_scheduler() -> None:
    """Start the scheduler and block until interrupted."""
    from push_service.tasks.broker import start_taskiq, stop_taskiq
    from push_service.tasks.scheduler import (
        scheduler as apscheduler,
    )
    from push_service.tasks.scheduler import (
        setup_scheduled_jobs,
        start_scheduler,
        stop_scheduler,
    )

    try:
        await start_taskiq()
    except Exception as e:
        error(f"Failed to start task broker: {e}")
        sys.exit(1)

    try:
        setup_scheduled_jobs()
        if not apscheduler.get_jobs():
            warning("No jobs scheduled; set SCHEDULER_ENABLED=true to enable the scans")
            return

        await start_scheduler()
        info("Scheduler running, press Ctrl+C to stop")
        await asyncio.Event().wait()
    except (KeyboardInterrupt, asyncio.CancelledError):
        info("Interrupted")
    finally:
        await stop_scheduler()
        await stop_taskiq()
