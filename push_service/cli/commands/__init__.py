"""CLI command modules."""

from push_service.cli.commands import config, notify, scheduler

__all__ = [
    "config",
    "notify",
    "scheduler",
]
