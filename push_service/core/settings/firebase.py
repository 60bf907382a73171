"""Firebase project and Firestore collection settings.

Environment variables use FIREBASE_ prefix.
Example: FIREBASE_PROJECT_ID=surakshith-app
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FirebaseSettings(BaseSettings):
    """Firebase Admin SDK configuration.

    When ``credentials_path`` is not set the SDK falls back to application
    default credentials (GOOGLE_APPLICATION_CREDENTIALS or the metadata server).
    """

    # ──────────────────────────────────────────────────────────────
    # Project / credentials
    # ──────────────────────────────────────────────────────────────

    enabled: bool = Field(
        default=True,
        description="Enable the Firebase adapters (Firestore + FCM).",
    )

    project_id: str | None = Field(
        default=None,
        description="Google Cloud project id. None lets the SDK infer it from credentials.",
    )

    credentials_path: Path | None = Field(
        default=None,
        description="Path to a service-account JSON file. None uses application default credentials.",
    )

    app_name: str = Field(
        default="push-service",
        min_length=1,
        max_length=100,
        description="Name of the firebase_admin App instance.",
    )

    # ──────────────────────────────────────────────────────────────
    # Collections
    # ──────────────────────────────────────────────────────────────

    users_collection: str = Field(default="users", min_length=1)
    clients_collection: str = Field(default="clients", min_length=1)
    tasks_collection: str = Field(default="tasks", min_length=1)
    reports_collection: str = Field(default="reports", min_length=1)
    notifications_collection: str = Field(default="notifications", min_length=1)

    # ──────────────────────────────────────────────────────────────
    # Field names
    # ──────────────────────────────────────────────────────────────

    email_field: str = Field(default="email", description="User field holding the lookup key.")
    client_field: str = Field(default="clientId", description="User field holding the client id.")
    tokens_field: str = Field(default="fcmTokens", description="User field holding device tokens.")
    status_field: str = Field(default="status", description="Task field holding the workflow status.")
    due_date_field: str = Field(default="dueDate", description="Task field holding the due timestamp.")
    created_at_field: str = Field(
        default="createdAt",
        description="Notification record field holding the creation time in epoch milliseconds.",
    )

    model_config = SettingsConfigDict(
        env_prefix="FIREBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def uses_default_credentials(self) -> bool:
        """Check if application default credentials will be used."""
        return self.credentials_path is None

    @property
    def is_configured(self) -> bool:
        """Check if Firebase is enabled and has a usable credential source."""
        if not self.enabled:
            return False
        if self.credentials_path is None:
            return True
        return self.credentials_path.is_file()
