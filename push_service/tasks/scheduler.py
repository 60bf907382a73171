"""APScheduler integration for the scheduled notification scans.

- APScheduler triggers the scans on cron schedules in the configured timezone
- Taskiq executes them via ``.kiq()`` on the broker

Architecture:
    APScheduler (in-process) → Taskiq kiq() → broker → Taskiq worker
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from push_service.core.settings import get_scheduler_settings

logger = logging.getLogger(__name__)

scheduler_settings = get_scheduler_settings()

scheduler = AsyncIOScheduler(
    timezone=scheduler_settings.timezone,
    job_defaults={
        "coalesce": True,  # Combine multiple pending executions into one
        "max_instances": 1,
        "misfire_grace_time": scheduler_settings.misfire_grace_seconds,
    },
)

OVERDUE_JOB_ID = "check_overdue_tasks"
CLEANUP_JOB_ID = "cleanup_old_notifications"


# =============================================================================
# Scheduler Job Wrappers
# =============================================================================
# APScheduler requires callables that await the Taskiq kiq() call.


async def _schedule_overdue_check() -> None:
    """Wrapper for the overdue task reminder scan."""
    from push_service.tasks.notifications.tasks import check_overdue_tasks

    await check_overdue_tasks.kiq()


async def _schedule_notification_cleanup() -> None:
    """Wrapper for the notification record cleanup."""
    from push_service.tasks.notifications.tasks import cleanup_old_notifications

    await cleanup_old_notifications.kiq()


# =============================================================================
# Scheduler Management
# =============================================================================


def _add_cron_job(func: Callable[[], Awaitable[None]], cron: str, job_id: str, name: str) -> None:
    # replace_existing does not dedupe jobs added before the scheduler starts
    if scheduler.get_job(job_id) is not None:
        scheduler.remove_job(job_id)

    scheduler.add_job(
        func=func,
        trigger=CronTrigger.from_crontab(cron, timezone=scheduler_settings.timezone),
        id=job_id,
        name=name,
        replace_existing=True,
    )


def setup_scheduled_jobs() -> None:
    """Register the scans with APScheduler.

    Call during startup after the Taskiq broker is initialized. Does nothing
    when scheduling is disabled.
    """
    if not scheduler_settings.enabled:
        logger.warning("Scheduler disabled, skipping job scheduling")
        return

    logger.info("Setting up scheduled jobs with APScheduler")

    # Overdue reminders, daily at 09:00 by default
    _add_cron_job(_schedule_overdue_check, scheduler_settings.overdue_cron, OVERDUE_JOB_ID, "Check overdue tasks")

    # Record cleanup, Sundays at midnight by default
    _add_cron_job(
        _schedule_notification_cleanup,
        scheduler_settings.cleanup_cron,
        CLEANUP_JOB_ID,
        "Clean up old notifications",
    )

    logger.info("Scheduled jobs registered", extra={"job_count": len(scheduler.get_jobs())})


async def start_scheduler() -> None:
    """Start the APScheduler. Call after setup_scheduled_jobs()."""
    if not scheduler.running:
        logger.info("Starting APScheduler")
        scheduler.start()
        logger.info("APScheduler started", extra={"job_count": len(scheduler.get_jobs())})
    else:
        logger.warning("APScheduler is already running")


async def stop_scheduler() -> None:
    """Stop the APScheduler gracefully."""
    if scheduler.running:
        logger.info("Stopping APScheduler")
        scheduler.shutdown(wait=True)
        logger.info("APScheduler stopped")
    else:
        logger.debug("APScheduler is not running")


def get_job_status() -> list[dict[str, Any]]:
    """Get status of all scheduled jobs.

    Returns:
        List of job information dictionaries.
    """
    jobs = []
    for job in scheduler.get_jobs():
        next_run_time = getattr(job, "next_run_time", None)
        jobs.append(
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": next_run_time.isoformat() if next_run_time else None,
                "trigger": str(job.trigger),
            }
        )
    return jobs
