"""Alerts module.

The emergency, assignment and progress workflows. Each resolves the
relevant staff, then fans the event out to every one of them over in-app
notifications and email, tolerating per-recipient failure.
"""

from modules.alerts.assignment import AssignmentOrchestrator, roles_for
from modules.alerts.audit import EMAIL_LOGS_COLLECTION, EmailAuditLog
from modules.alerts.emergency import EmergencyOrchestrator
from modules.alerts.fanout import FanOut, settle_all
from modules.alerts.models import (
    NO_STAFF_ERROR,
    AssignmentRequest,
    EmailKind,
    EmergencyRequest,
    FanOutSummary,
    ProgressRequest,
    RecipientOutcome,
    emergency_priority,
)
from modules.alerts.progress import ProgressOrchestrator

__all__ = [
    "AssignmentOrchestrator",
    "AssignmentRequest",
    "EMAIL_LOGS_COLLECTION",
    "EmailAuditLog",
    "EmailKind",
    "EmergencyOrchestrator",
    "EmergencyRequest",
    "FanOut",
    "FanOutSummary",
    "NO_STAFF_ERROR",
    "ProgressOrchestrator",
    "ProgressRequest",
    "RecipientOutcome",
    "emergency_priority",
    "roles_for",
    "settle_all",
]
