"""Recipient resolution: user identifiers to device endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from push_service.features.notifications.models import clean_identifiers

if TYPE_CHECKING:
    from collections.abc import Iterable

    from push_service.features.notifications.ports import UserDirectory

logger = logging.getLogger(__name__)


class RecipientResolver:
    """Maps user identifiers (emails) to a deduplicated set of FCM tokens.

    Lookups for distinct identifiers run concurrently. A failed lookup is
    logged and contributes no endpoints; it never aborts the others.
    """

    def __init__(self, users: UserDirectory) -> None:
        self._users = users

    async def resolve(self, identifiers: Iterable[object] | None) -> set[str]:
        """Resolve identifiers to the union of their users' endpoints.

        Args:
            identifiers: Email addresses. Non-string and empty entries are
                dropped; None or a non-list value is treated as empty.

        Returns:
            Set of unique endpoint tokens (possibly empty).
        """
        emails = list(dict.fromkeys(clean_identifiers(_as_list(identifiers))))
        if not emails:
            logger.debug("No valid recipient identifiers supplied")
            return set()

        per_user = await asyncio.gather(*(self._endpoints_for(email) for email in emails))

        endpoints: set[str] = set()
        for tokens in per_user:
            endpoints.update(tokens)

        logger.info(
            "Resolved recipients",
            extra={"recipient_count": len(emails), "endpoint_count": len(endpoints)},
        )
        return endpoints

    async def _endpoints_for(self, email: str) -> list[str]:
        try:
            user = await self._users.find_by_email(email)
        except Exception:
            logger.exception("Failed to look up endpoints", extra={"email": email})
            return []

        if user is None:
            logger.info("User not found", extra={"email": email})
            return []

        if not user.fcm_tokens:
            logger.info("User has no registered endpoints", extra={"email": email})
            return []

        logger.debug(
            "Found endpoints for user",
            extra={"email": email, "endpoint_count": len(user.fcm_tokens)},
        )
        return user.fcm_tokens

    async def client_members(self, client_id: str | None) -> list[str]:
        """Return the emails of every user belonging to a client.

        Raises:
            DirectoryLookupError: If the directory query fails.
        """
        if not client_id:
            return []
        users = await self._users.find_by_client(client_id)
        return [user.email for user in users if user.email]


def _as_list(identifiers: object) -> object:
    # Sets are accepted as recipient lists; strings and mappings are not
    if isinstance(identifiers, set | frozenset):
        return list(identifiers)
    return identifiers
