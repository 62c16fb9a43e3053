"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure
services and the alert workflows built on them. Every service receives its
collaborators explicitly; tests override these with
``app.dependency_overrides`` or build the services directly.
"""

from functools import lru_cache

from infrastructure.auth import AuthProvider, FirebaseAuthProvider, StaticAuthProvider
from infrastructure.configuration import Settings
from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    EmailChannel,
    NotificationService,
    NotificationStore,
)
from infrastructure.persistence import DocumentStore, InMemoryDocumentStore
from infrastructure.persistence.firestore import (
    FirestoreDocumentStore,
    init_firebase_app,
)
from infrastructure.resilience import RetryPolicy
from modules.alerts import (
    AssignmentOrchestrator,
    EmailAuditLog,
    EmergencyOrchestrator,
    FanOut,
    ProgressOrchestrator,
)
from modules.care_team import StaffResolver

logger = get_module_logger()


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process.

    Application code should use the DI type alias for testability:
        from infrastructure.services import SettingsDep
        @router.get("/config")
        def get_config(settings: SettingsDep):
            return settings.model_dump()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_document_store() -> DocumentStore:
    """
    Get the application document store.

    ``DOCUMENT_STORE_BACKEND=firestore`` initializes the Firebase app and
    uses Firestore; anything else keeps documents in process memory.
    Both backends retry with the configured policy.

    Returns:
        DocumentStore: Cached document store.
    """
    settings = get_settings()
    retry_policy = RetryPolicy.from_settings(settings)
    if settings.firestore.uses_firestore:
        init_firebase_app(
            settings.firestore.FIREBASE_CREDENTIALS,
            settings.firestore.FIREBASE_PROJECT_ID,
        )
        store: DocumentStore = FirestoreDocumentStore(retry_policy=retry_policy)
    else:
        store = InMemoryDocumentStore(retry_policy=retry_policy)
    logger.info("document_store_ready", backend=store.backend_name)
    return store


@lru_cache
def get_notification_store() -> NotificationStore:
    return NotificationStore(get_document_store())


@lru_cache
def get_notification_service() -> NotificationService:
    """
    Get the notification service singleton.

    The dispatcher it owns holds the subscriber registry and the delayed
    task queue, so there must be exactly one per process.
    """
    return NotificationService.from_settings(get_settings(), get_notification_store())


@lru_cache
def get_email_channel() -> EmailChannel:
    return EmailChannel.from_settings(get_settings().email)


@lru_cache
def get_staff_resolver() -> StaffResolver:
    return StaffResolver(get_document_store())


@lru_cache
def get_auth_provider() -> AuthProvider:
    """
    Get the authentication provider.

    With ``AUTH_ENABLED`` the bearer token must be a Firebase ID token;
    without it the token is taken as the caller's uid (local development).
    """
    settings = get_settings()
    documents = get_document_store()
    if settings.server.AUTH_ENABLED:
        init_firebase_app(
            settings.firestore.FIREBASE_CREDENTIALS,
            settings.firestore.FIREBASE_PROJECT_ID,
        )
        return FirebaseAuthProvider(
            documents, retry_policy=RetryPolicy.from_settings(settings)
        )
    logger.warning("auth_disabled_tokens_trusted")
    return StaticAuthProvider(documents, trust_tokens=True)


@lru_cache
def get_fanout() -> FanOut:
    settings = get_settings()
    return FanOut(
        get_notification_service(),
        get_email_channel(),
        EmailAuditLog(get_document_store(), enabled=settings.alerts.EMAIL_AUDIT_ENABLED),
    )


@lru_cache
def get_emergency_orchestrator() -> EmergencyOrchestrator:
    return EmergencyOrchestrator(
        get_staff_resolver(), get_notification_service(), get_fanout()
    )


@lru_cache
def get_assignment_orchestrator() -> AssignmentOrchestrator:
    return AssignmentOrchestrator(get_staff_resolver(), get_fanout())


@lru_cache
def get_progress_orchestrator() -> ProgressOrchestrator:
    return ProgressOrchestrator(get_staff_resolver(), get_fanout())
