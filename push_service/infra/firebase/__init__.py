"""Firebase adapters: Firestore directories/stores and the FCM transport."""

from push_service.infra.firebase.app import (
    get_firebase_app,
    get_firestore_client,
    initialize_firebase,
)
from push_service.infra.firebase.firestore import (
    FirestoreClientDirectory,
    FirestoreNotificationRecordStore,
    FirestoreTaskStore,
    FirestoreUserDirectory,
)
from push_service.infra.firebase.messaging import FcmTransport

__all__ = [
    "FcmTransport",
    "FirestoreClientDirectory",
    "FirestoreNotificationRecordStore",
    "FirestoreTaskStore",
    "FirestoreUserDirectory",
    "get_firebase_app",
    "get_firestore_client",
    "initialize_firebase",
]
