"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    AssignmentOrchestratorDep,
    AuthProviderDep,
    DocumentStoreDep,
    EmailChannelDep,
    EmergencyOrchestratorDep,
    NotificationServiceDep,
    ProgressOrchestratorDep,
    SettingsDep,
    StaffResolverDep,
)
from infrastructure.services.providers import (
    get_assignment_orchestrator,
    get_auth_provider,
    get_document_store,
    get_email_channel,
    get_emergency_orchestrator,
    get_fanout,
    get_notification_service,
    get_notification_store,
    get_progress_orchestrator,
    get_settings,
    get_staff_resolver,
)

__all__ = [
    "AssignmentOrchestratorDep",
    "AuthProviderDep",
    "DocumentStoreDep",
    "EmailChannelDep",
    "EmergencyOrchestratorDep",
    "NotificationServiceDep",
    "ProgressOrchestratorDep",
    "SettingsDep",
    "StaffResolverDep",
    "get_assignment_orchestrator",
    "get_auth_provider",
    "get_document_store",
    "get_email_channel",
    "get_emergency_orchestrator",
    "get_fanout",
    "get_notification_service",
    "get_notification_store",
    "get_progress_orchestrator",
    "get_settings",
    "get_staff_resolver",
]
