# modules/alerts/models.py
"""Request and result models for the alert workflows."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from infrastructure.notifications import NotificationPriority
from modules.care_team import StaffRole

NO_STAFF_ERROR = "No assigned staff found"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmailKind:
    ASSIGNMENT = "assignment"
    EMERGENCY = "emergency"
    PROGRESS = "progress"


def emergency_priority(severity: str) -> NotificationPriority:
    """critical -> critical, high -> urgent, anything else -> high."""
    severity = (severity or "").strip().lower()
    if severity == "critical":
        return NotificationPriority.CRITICAL
    if severity == "high":
        return NotificationPriority.URGENT
    return NotificationPriority.HIGH


class EmergencyRequest(CamelModel):
    """An emergency raised by or for a patient."""

    patient_id: str
    patient_name: str
    assigned_doctor: Optional[str] = None
    assigned_nurse: Optional[str] = None
    assigned_buddy: Optional[str] = None
    severity: str = "medium"
    description: str
    location: str = "Unknown"
    emergency_type: str = "Medical Emergency"

    @field_validator("patient_id", "description")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v


class AssignmentRequest(CamelModel):
    """Staff newly assigned to a patient.

    ``assignment_type`` names the slot that changed (doctor, nurse, buddy,
    or ``all``); only staff in that slot are contacted.
    """

    patient_id: str
    patient_name: str
    assigned_doctor: Optional[str] = None
    assigned_nurse: Optional[str] = None
    assigned_buddy: Optional[str] = None
    assignment_type: str = "all"


class ProgressRequest(CamelModel):
    patient_id: str
    summary: str
    update_type: str = "General Progress"
    patient_name: Optional[str] = None


class RecipientOutcome(CamelModel):
    """What happened for one resolved recipient.

    Attributes:
        staff_id: Resolved staff record id
        name: Staff display name
        role: Staff role
        notification_id: In-app notification created, if any
        notification_error: Why the in-app notification failed
        email_sent: Whether the transport accepted the email
        provider: Email transport used
        message_id: Transport message id
        email_error: Why the email failed
    """

    staff_id: str
    name: str
    role: StaffRole
    notification_id: Optional[str] = None
    notification_error: Optional[str] = None
    email_sent: bool = False
    provider: Optional[str] = None
    message_id: Optional[str] = None
    email_error: Optional[str] = None


class FanOutSummary(CamelModel):
    """Aggregate result of an alert workflow.

    ``successful`` and ``failed`` count email sends; in-app notification
    outcomes are counted separately.
    """

    success: bool
    total_staff: int = 0
    successful: int = 0
    failed: int = 0
    notifications_created: int = 0
    notifications_failed: int = 0
    confirmation_id: Optional[str] = None
    results: List[RecipientOutcome] = Field(default_factory=list)
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def no_recipients(cls) -> "FanOutSummary":
        return cls(
            success=False,
            error=NO_STAFF_ERROR,
            message="No assigned staff found. Please contact staff directly.",
        )

    @classmethod
    def from_outcomes(cls, outcomes: List[RecipientOutcome]) -> "FanOutSummary":
        sent = sum(1 for outcome in outcomes if outcome.email_sent)
        created = sum(1 for outcome in outcomes if outcome.notification_id)
        return cls(
            success=True,
            total_staff=len(outcomes),
            successful=sent,
            failed=len(outcomes) - sent,
            notifications_created=created,
            notifications_failed=len(outcomes) - created,
            results=outcomes,
        )
