"""Firebase Cloud Messaging multicast transport."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from firebase_admin import messaging
from firebase_admin.exceptions import FirebaseError

from push_service.core.exceptions import TransportError
from push_service.features.notifications.models import EndpointResult, MulticastResult

if TYPE_CHECKING:
    import firebase_admin

    from push_service.features.notifications.models import MulticastRequest

logger = logging.getLogger(__name__)


class FcmTransport:
    """Sends multicast messages through ``messaging.send_each_for_multicast``.

    The SDK call is blocking, so it runs in a worker thread.
    """

    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    def build_message(self, request: MulticastRequest) -> messaging.MulticastMessage:
        return messaging.MulticastMessage(
            tokens=list(request.endpoints),
            notification=messaging.Notification(title=request.title, body=request.body),
            data=dict(request.data),
        )

    async def send_multicast(self, request: MulticastRequest) -> MulticastResult:
        try:
            message = self.build_message(request)
            response = await asyncio.to_thread(
                messaging.send_each_for_multicast,
                message,
                app=self._app,
            )
        except (FirebaseError, ValueError) as e:
            # ValueError: message rejected by the SDK (e.g. more than 500 tokens)
            raise TransportError(
                f"FCM multicast failed: {e}",
                endpoint_count=len(request.endpoints),
            ) from e

        return MulticastResult(
            responses=tuple(
                EndpointResult(
                    success=r.success,
                    message_id=r.message_id,
                    error=_describe(r.exception),
                )
                for r in response.responses
            )
        )


def _describe(exc: Exception | None) -> str | None:
    if exc is None:
        return None
    code = getattr(exc, "code", None)
    return f"{code}: {exc}" if code else str(exc)
