"""Taskiq broker for change-event triggers and scheduled scans.

Task and report change events are delivered to the service as taskiq tasks
(see ``push_service.tasks.notifications.tasks``). Producers enqueue them with
``.kiq()``; a worker executes them:

    taskiq worker push_service.tasks.broker:broker

When RabbitMQ is configured the broker is backed by taskiq-aio-pika.
Otherwise an in-process ``InMemoryBroker`` is used, which executes tasks
in the enqueuing process (CLI runs, local development, tests).
"""

from __future__ import annotations

import logging

from taskiq import AsyncBroker, InMemoryBroker
from taskiq_aio_pika import AioPikaBroker

from push_service.core.settings import get_rabbit_settings
from push_service.infra.logging import setup_logging

logger = logging.getLogger(__name__)

rabbit_settings = get_rabbit_settings()
setup_logging()

TASK_QUEUE = "notification-tasks"


def _create_broker() -> AsyncBroker:
    if not rabbit_settings.is_configured:
        logger.info("RabbitMQ not configured, using in-process task broker")
        return InMemoryBroker()

    queue = rabbit_settings.get_prefixed_queue(TASK_QUEUE)
    logger.info("Taskiq RabbitMQ broker configured", extra={"queue": queue})
    return AioPikaBroker(
        url=rabbit_settings.get_url(),
        queue_name=queue,
        declare_exchange=True,
        declare_queues=True,
    )


broker: AsyncBroker = _create_broker()


async def start_taskiq() -> None:
    """Start the Taskiq broker.

    Raises:
        ConnectionError: If unable to connect to RabbitMQ.
    """
    logger.info("Starting Taskiq broker")

    try:
        await broker.startup()
        logger.info("Taskiq broker started successfully")
    except Exception as e:
        logger.exception("Failed to start Taskiq broker", extra={"error": str(e)})
        raise


async def stop_taskiq() -> None:
    """Stop the Taskiq broker, logging (not raising) shutdown errors."""
    logger.info("Stopping Taskiq broker")

    try:
        await broker.shutdown()
        logger.info("Taskiq broker stopped successfully")
    except Exception as e:
        logger.exception("Error stopping Taskiq broker", extra={"error": str(e)})


# Task modules register themselves with the broker on import; the worker
# only imports this module.
import push_service.tasks.notifications.tasks  # noqa: E402, F401
