"""Firestore-backed directories and stores.

Each adapter converts raw documents into the snapshot models of the
notification core and wraps Google API failures in ``DirectoryLookupError``.
A missing document is returned as None/empty, never raised.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter

from push_service.core.exceptions import DirectoryLookupError
from push_service.features.notifications.models import (
    ClientRecord,
    NotificationRecordRef,
    TaskDocument,
    UserRecord,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from google.cloud.firestore import AsyncClient

    from push_service.core.settings.firebase import FirebaseSettings

logger = logging.getLogger(__name__)


class FirestoreUserDirectory:
    """User lookups over the users collection."""

    def __init__(self, db: AsyncClient, settings: FirebaseSettings) -> None:
        self._db = db
        self._settings = settings

    def _to_user(self, data: dict[str, Any] | None) -> UserRecord:
        data = data or {}
        return UserRecord.from_document(
            {
                "email": data.get(self._settings.email_field),
                "clientId": data.get(self._settings.client_field),
                "fcmTokens": data.get(self._settings.tokens_field),
            }
        )

    async def find_by_email(self, email: str) -> UserRecord | None:
        collection = self._settings.users_collection
        query = (
            self._db.collection(collection)
            .where(filter=FieldFilter(self._settings.email_field, "==", email))
            .limit(1)
        )
        try:
            docs = await query.get()
        except GoogleAPIError as e:
            raise DirectoryLookupError(
                f"User lookup failed: {e}",
                collection=collection,
                key=email,
            ) from e

        if not docs:
            return None
        return self._to_user(docs[0].to_dict())

    async def find_by_client(self, client_id: str) -> Sequence[UserRecord]:
        collection = self._settings.users_collection
        query = self._db.collection(collection).where(
            filter=FieldFilter(self._settings.client_field, "==", client_id)
        )
        try:
            docs = await query.get()
        except GoogleAPIError as e:
            raise DirectoryLookupError(
                f"Client user lookup failed: {e}",
                collection=collection,
                key=client_id,
            ) from e

        return [self._to_user(doc.to_dict()) for doc in docs]


class FirestoreClientDirectory:
    """Point lookups over the clients collection."""

    def __init__(self, db: AsyncClient, settings: FirebaseSettings) -> None:
        self._db = db
        self._settings = settings

    async def get_client(self, client_id: str) -> ClientRecord | None:
        collection = self._settings.clients_collection
        try:
            snapshot = await self._db.collection(collection).document(client_id).get()
        except GoogleAPIError as e:
            raise DirectoryLookupError(
                f"Client lookup failed: {e}",
                collection=collection,
                key=client_id,
            ) from e

        if not snapshot.exists:
            return None
        return ClientRecord.from_document(client_id, snapshot.to_dict())


class FirestoreTaskStore:
    """Overdue-task query over the tasks collection.

    Needs a composite index on (status, dueDate).
    """

    def __init__(self, db: AsyncClient, settings: FirebaseSettings) -> None:
        self._db = db
        self._settings = settings

    async def find_overdue(
        self,
        now: datetime,
        statuses: Sequence[str],
    ) -> Sequence[TaskDocument]:
        collection = self._settings.tasks_collection
        query = (
            self._db.collection(collection)
            .where(filter=FieldFilter(self._settings.due_date_field, "<", now))
            .where(filter=FieldFilter(self._settings.status_field, "in", list(statuses)))
        )
        try:
            return [
                TaskDocument.from_snapshot(doc.id, doc.to_dict())
                async for doc in query.stream()
            ]
        except GoogleAPIError as e:
            raise DirectoryLookupError(
                f"Overdue task query failed: {e}",
                collection=collection,
            ) from e


class FirestoreNotificationRecordStore:
    """Range query and batch delete over the notifications collection.

    ``createdAt`` is stored as epoch milliseconds. Firestore caps a write
    batch at 500 operations.
    """

    def __init__(self, db: AsyncClient, settings: FirebaseSettings) -> None:
        self._db = db
        self._settings = settings

    async def find_created_before(self, cutoff_ms: int) -> Sequence[NotificationRecordRef]:
        collection = self._settings.notifications_collection
        query = self._db.collection(collection).where(
            filter=FieldFilter(self._settings.created_at_field, "<", cutoff_ms)
        )
        try:
            docs = await query.get()
        except GoogleAPIError as e:
            raise DirectoryLookupError(
                f"Notification record query failed: {e}",
                collection=collection,
            ) from e

        refs = []
        for doc in docs:
            created_at = (doc.to_dict() or {}).get(self._settings.created_at_field)
            refs.append(
                NotificationRecordRef(
                    id=doc.id,
                    created_at_ms=created_at if isinstance(created_at, int) else None,
                )
            )
        return refs

    async def delete_batch(self, records: Sequence[NotificationRecordRef]) -> None:
        if not records:
            return

        collection = self._db.collection(self._settings.notifications_collection)
        batch = self._db.batch()
        for record in records:
            batch.delete(collection.document(record.id))

        try:
            await batch.commit()
        except GoogleAPIError as e:
            raise DirectoryLookupError(
                f"Batch delete failed: {e}",
                collection=self._settings.notifications_collection,
            ) from e
