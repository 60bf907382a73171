"""Best-effort multicast dispatch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from push_service.features.notifications.models import (
    NOOP_OUTCOME,
    DispatchOutcome,
    DispatchStatus,
    EndpointFailure,
    MulticastRequest,
    stringify_payload,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

    from push_service.features.notifications.ports import PushTransport

logger = logging.getLogger(__name__)

DEFAULT_CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"


class PushDispatcher:
    """Sends one multicast per call and classifies per-endpoint outcomes.

    One attempt only: no retry, no backoff and no pruning of stale tokens.
    Transport failures are logged and reported as a FAILED outcome, never
    raised to the caller.
    """

    def __init__(
        self,
        transport: PushTransport,
        click_action: str = DEFAULT_CLICK_ACTION,
    ) -> None:
        self._transport = transport
        self._click_action = click_action

    async def send(
        self,
        endpoints: Collection[str],
        title: str,
        body: str,
        data: Mapping[str, object] | None = None,
    ) -> DispatchOutcome:
        """Send a notification to every endpoint.

        Args:
            endpoints: Device tokens; duplicates are collapsed before sending.
            title: Notification title.
            body: Notification body.
            data: Extra payload; values are sent as strings.

        Returns:
            NOOP if there was nothing to send, FAILED if the transport call
            failed as a whole, SENT otherwise (even with per-endpoint failures).
        """
        unique = tuple(sorted(set(endpoints)))
        if not unique:
            logger.info("No endpoints to send notification to")
            return NOOP_OUTCOME

        payload = stringify_payload(data or {})
        payload["click_action"] = self._click_action

        request = MulticastRequest(endpoints=unique, title=title, body=body, data=payload)

        try:
            result = await self._transport.send_multicast(request)
        except Exception:
            logger.exception(
                "Error sending notification",
                extra={"endpoint_count": len(unique), "notification_type": payload.get("type")},
            )
            return DispatchOutcome(status=DispatchStatus.FAILED, endpoint_count=len(unique))

        failures = tuple(
            EndpointFailure(index=idx, endpoint=endpoint, error=response.error)
            for idx, (endpoint, response) in enumerate(zip(unique, result.responses, strict=False))
            if not response.success
        )

        logger.info(
            "Multicast sent",
            extra={
                "notification_type": payload.get("type"),
                "success_count": result.success_count,
                "failure_count": result.failure_count,
            },
        )
        for failure in failures:
            logger.warning(
                "Failed endpoint %d: %s",
                failure.index,
                failure.error,
                extra={"endpoint_index": failure.index},
            )

        return DispatchOutcome(
            status=DispatchStatus.SENT,
            endpoint_count=len(unique),
            result=result,
            failures=failures,
        )
