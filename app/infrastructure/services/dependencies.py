"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated

from fastapi import Depends

from infrastructure.auth import AuthProvider
from infrastructure.configuration import Settings
from infrastructure.notifications import EmailChannel, NotificationService
from infrastructure.persistence import DocumentStore
from infrastructure.services.providers import (
    get_assignment_orchestrator,
    get_auth_provider,
    get_document_store,
    get_email_channel,
    get_emergency_orchestrator,
    get_notification_service,
    get_progress_orchestrator,
    get_settings,
    get_staff_resolver,
)
from modules.alerts import (
    AssignmentOrchestrator,
    EmergencyOrchestrator,
    ProgressOrchestrator,
)
from modules.care_team import StaffResolver

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Storage and identity
DocumentStoreDep = Annotated[DocumentStore, Depends(get_document_store)]
AuthProviderDep = Annotated[AuthProvider, Depends(get_auth_provider)]

# Notification and email channels
NotificationServiceDep = Annotated[
    NotificationService, Depends(get_notification_service)
]
EmailChannelDep = Annotated[EmailChannel, Depends(get_email_channel)]

# Care team and alert workflows
StaffResolverDep = Annotated[StaffResolver, Depends(get_staff_resolver)]
EmergencyOrchestratorDep = Annotated[
    EmergencyOrchestrator, Depends(get_emergency_orchestrator)
]
AssignmentOrchestratorDep = Annotated[
    AssignmentOrchestrator, Depends(get_assignment_orchestrator)
]
ProgressOrchestratorDep = Annotated[
    ProgressOrchestrator, Depends(get_progress_orchestrator)
]

__all__ = [
    "SettingsDep",
    "DocumentStoreDep",
    "AuthProviderDep",
    "NotificationServiceDep",
    "EmailChannelDep",
    "StaffResolverDep",
    "EmergencyOrchestratorDep",
    "AssignmentOrchestratorDep",
    "ProgressOrchestratorDep",
]
