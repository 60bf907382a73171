"""Production wiring for the notification core.

Builds a ``NotificationContext`` backed by Firestore and FCM from settings.

Example usage:
    from push_service.features.notifications.dependencies import get_notification_context

    context = get_notification_context()
    service = NotificationService(context)
"""

from __future__ import annotations

from functools import lru_cache

from push_service.core.settings import get_firebase_settings, get_notification_settings
from push_service.features.notifications.context import NotificationContext
from push_service.infra.firebase import (
    FcmTransport,
    FirestoreClientDirectory,
    FirestoreNotificationRecordStore,
    FirestoreTaskStore,
    FirestoreUserDirectory,
    get_firebase_app,
    get_firestore_client,
)


def build_notification_context() -> NotificationContext:
    """Create a fresh Firestore/FCM-backed context.

    Raises:
        ConfigurationError: If Firebase is disabled or misconfigured.
    """
    firebase_settings = get_firebase_settings()
    db = get_firestore_client()

    return NotificationContext(
        users=FirestoreUserDirectory(db, firebase_settings),
        clients=FirestoreClientDirectory(db, firebase_settings),
        tasks=FirestoreTaskStore(db, firebase_settings),
        records=FirestoreNotificationRecordStore(db, firebase_settings),
        transport=FcmTransport(get_firebase_app()),
        settings=get_notification_settings(),
    )


@lru_cache(maxsize=1)
def get_notification_context() -> NotificationContext:
    """Get the process-wide production context (cached)."""
    return build_notification_context()
