"""Emergency alert workflow.

triggered -> recipients resolved -> fanned out -> complete. Nothing about
the workflow itself is persisted; the notifications and email audit
entries it produces are.
"""

from typing import Optional

from infrastructure.logging import (
    bind_request_context,
    get_correlation_id,
    get_module_logger,
)
from infrastructure.notifications import (
    NotificationPriority,
    NotificationService,
    NotificationSpec,
    NotificationType,
    RelatedEntity,
)
from infrastructure.notifications.models import utcnow
from modules.alerts.fanout import FanOut
from modules.alerts.models import (
    EmailKind,
    EmergencyRequest,
    FanOutSummary,
    emergency_priority,
)
from modules.alerts.templates import EmergencyEmail, render_emergency
from modules.care_team import StaffIdentity, StaffResolver, StaffRole

logger = get_module_logger()


class EmergencyOrchestrator:
    """Fans an emergency out to the patient's assigned staff.

    Each resolved staff member gets an in-app notification that requires
    acknowledgment and an emergency email; the patient gets a confirmation
    saying how many staff were notified. With nobody to notify, nothing is
    sent and the summary says so, so the caller can point the patient at
    manual escalation.
    """

    def __init__(
        self,
        resolver: StaffResolver,
        notifications: NotificationService,
        fanout: FanOut,
    ):
        self.resolver = resolver
        self.notifications = notifications
        self.fanout = fanout

    async def create_emergency_alert(
        self,
        patient_id: str,
        patient_name: str,
        assigned_doctor: Optional[str] = None,
        assigned_nurse: Optional[str] = None,
        assigned_buddy: Optional[str] = None,
        severity: str = "medium",
        description: str = "",
        location: str = "Unknown",
    ) -> FanOutSummary:
        return await self.handle(
            EmergencyRequest(
                patient_id=patient_id,
                patient_name=patient_name,
                assigned_doctor=assigned_doctor,
                assigned_nurse=assigned_nurse,
                assigned_buddy=assigned_buddy,
                severity=severity,
                description=description,
                location=location,
            )
        )

    async def handle(self, request: EmergencyRequest) -> FanOutSummary:
        """Run the workflow for one emergency.

        Returns:
            FanOutSummary. ``success`` is False only when no staff resolved.
        """
        with bind_request_context(
            correlation_id=get_correlation_id(),
            workflow="emergency",
            patient_id=request.patient_id,
        ):
            logger.info(
                "emergency_alert_triggered",
                severity=request.severity,
                location=request.location,
            )
            recipients = await self.resolver.resolve_many(
                {
                    StaffRole.DOCTOR: request.assigned_doctor,
                    StaffRole.NURSE: request.assigned_nurse,
                    StaffRole.MEDICAL_BUDDY: request.assigned_buddy,
                }
            )
            if not recipients:
                logger.warning("emergency_no_recipients")
                return FanOutSummary.no_recipients()

            reported_at = utcnow()
            priority = emergency_priority(request.severity)
            metadata = {
                "emergencyType": request.emergency_type,
                "severity": request.severity,
                "patientId": request.patient_id,
                "patientName": request.patient_name,
                "location": request.location,
                "timestamp": reported_at.isoformat(),
            }

            def build_notification(staff: StaffIdentity) -> NotificationSpec:
                return NotificationSpec(
                    recipient_id=staff.id,
                    type=NotificationType.EMERGENCY,
                    priority=priority,
                    title="Emergency Alert",
                    message=(
                        f"EMERGENCY: {request.emergency_type} - {request.description}. "
                        f"Patient: {request.patient_name}. Location: {request.location}"
                    ),
                    sender_id="system",
                    related_entity=RelatedEntity(kind="emergency", id=request.patient_id),
                    requires_acknowledgment=True,
                    metadata=metadata,
                )

            def build_email(staff: StaffIdentity):
                return render_emergency(
                    EmergencyEmail(
                        staff_name=staff.name,
                        role_label=staff.role.label,
                        patient_name=request.patient_name,
                        severity=request.severity,
                        description=request.description,
                        location=request.location,
                        reported_at=reported_at,
                    )
                )

            outcomes = await self.fanout.deliver(
                request.patient_id,
                recipients,
                EmailKind.EMERGENCY,
                build_email,
                build_notification=build_notification,
                email_priority="high",
            )
            summary = FanOutSummary.from_outcomes(outcomes)
            summary.confirmation_id = await self._confirm(
                request, len(recipients), metadata
            )
            summary.message = (
                f"Emergency alert sent to {summary.total_staff} assigned staff members"
            )

            logger.info(
                "emergency_fanned_out",
                priority=priority.value,
                total_staff=summary.total_staff,
                emails_sent=summary.successful,
                emails_failed=summary.failed,
                notifications_created=summary.notifications_created,
            )
            return summary

    async def _confirm(
        self, request: EmergencyRequest, staff_notified: int, metadata: dict
    ) -> Optional[str]:
        spec = NotificationSpec(
            recipient_id=request.patient_id,
            type=NotificationType.EMERGENCY,
            priority=NotificationPriority.MEDIUM,
            title="Emergency Alert Sent",
            message=(
                f"Your emergency alert has been sent to {staff_notified} assigned "
                "medical staff members. They have been notified and will respond "
                "shortly."
            ),
            sender_id="system",
            related_entity=RelatedEntity(kind="emergency", id=request.patient_id),
            requires_acknowledgment=False,
            metadata={**metadata, "staffNotified": staff_notified},
        )
        try:
            confirmation = await self.notifications.create_notification(spec)
        except Exception as e:
            logger.error("emergency_confirmation_failed", error=str(e))
            return None
        return confirmation.id
