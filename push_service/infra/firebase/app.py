"""Firebase Admin SDK bootstrap.

The App is created once per process from ``FirebaseSettings`` and shared by
the Firestore adapters and the FCM transport.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

import firebase_admin
from firebase_admin import credentials, firestore_async

from push_service.core.exceptions import ConfigurationError
from push_service.core.settings import get_firebase_settings

if TYPE_CHECKING:
    from google.cloud.firestore import AsyncClient

    from push_service.core.settings.firebase import FirebaseSettings

logger = logging.getLogger(__name__)


def initialize_firebase(settings: FirebaseSettings) -> firebase_admin.App:
    """Return the named App, initializing it on first use.

    Raises:
        ConfigurationError: If Firebase is disabled or the credentials file is missing.
    """
    if not settings.enabled:
        raise ConfigurationError("Firebase integration is disabled (FIREBASE_ENABLED=false)")

    try:
        return firebase_admin.get_app(settings.app_name)
    except ValueError:
        pass

    if settings.credentials_path is not None:
        if not settings.credentials_path.is_file():
            raise ConfigurationError(
                "Firebase credentials file not found",
                extra={"credentials_path": str(settings.credentials_path)},
            )
        cred = credentials.Certificate(str(settings.credentials_path))
    else:
        cred = credentials.ApplicationDefault()

    options = {"projectId": settings.project_id} if settings.project_id else None
    app = firebase_admin.initialize_app(cred, options, name=settings.app_name)

    logger.info(
        "Firebase app initialized",
        extra={
            "app_name": settings.app_name,
            "project_id": settings.project_id,
            "default_credentials": settings.uses_default_credentials,
        },
    )
    return app


@lru_cache(maxsize=1)
def get_firebase_app() -> firebase_admin.App:
    """Get the process-wide Firebase App built from cached settings."""
    return initialize_firebase(get_firebase_settings())


@lru_cache(maxsize=1)
def get_firestore_client() -> AsyncClient:
    """Get the process-wide async Firestore client."""
    return firestore_async.client(get_firebase_app())
