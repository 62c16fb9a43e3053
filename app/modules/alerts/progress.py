"""Patient progress update workflow: all assigned staff, normal priority."""

from typing import Optional

from infrastructure.logging import (
    bind_request_context,
    get_correlation_id,
    get_module_logger,
)
from infrastructure.notifications import (
    NotificationPriority,
    NotificationSpec,
    NotificationType,
    RelatedEntity,
)
from infrastructure.notifications.models import utcnow
from modules.alerts.fanout import FanOut
from modules.alerts.models import EmailKind, FanOutSummary, ProgressRequest
from modules.alerts.templates import ProgressEmail, render_progress
from modules.care_team import StaffIdentity, StaffResolver

logger = get_module_logger()


class ProgressOrchestrator:
    def __init__(self, resolver: StaffResolver, fanout: FanOut):
        self.resolver = resolver
        self.fanout = fanout

    async def send_progress_update(
        self,
        patient_id: str,
        progress_summary: str,
        update_type: str = "General Progress",
        patient_name: Optional[str] = None,
    ) -> FanOutSummary:
        return await self.handle(
            ProgressRequest(
                patient_id=patient_id,
                summary=progress_summary,
                update_type=update_type,
                patient_name=patient_name,
            )
        )

    async def handle(self, request: ProgressRequest) -> FanOutSummary:
        """Send the update to every staff member assigned on the patient record.

        A patient that cannot be found has no recipients.
        """
        with bind_request_context(
            correlation_id=get_correlation_id(),
            workflow="progress",
            patient_id=request.patient_id,
        ):
            patient = await self.resolver.get_patient(request.patient_id)
            recipients = (
                await self.resolver.resolve_many(patient.assignments())
                if patient
                else []
            )
            if not recipients:
                logger.warning("progress_no_recipients")
                return FanOutSummary.no_recipients()

            patient_name = request.patient_name or patient.display_name
            updated_at = utcnow()

            def build_notification(staff: StaffIdentity) -> NotificationSpec:
                return NotificationSpec(
                    recipient_id=staff.id,
                    type=NotificationType.PROGRESS_UPDATE,
                    priority=NotificationPriority.MEDIUM,
                    title=f"Progress Update - {patient_name}",
                    message=request.summary,
                    sender_id="system",
                    related_entity=RelatedEntity(kind="patient", id=request.patient_id),
                    requires_acknowledgment=False,
                    metadata={
                        "patientId": request.patient_id,
                        "patientName": patient_name,
                        "updateType": request.update_type,
                    },
                )

            def build_email(staff: StaffIdentity):
                return render_progress(
                    ProgressEmail(
                        staff_name=staff.name,
                        role_label=staff.role.label,
                        patient_name=patient_name,
                        update_type=request.update_type,
                        summary=request.summary,
                        updated_at=updated_at,
                    )
                )

            outcomes = await self.fanout.deliver(
                request.patient_id,
                recipients,
                EmailKind.PROGRESS,
                build_email,
                build_notification=build_notification,
            )
            summary = FanOutSummary.from_outcomes(outcomes)
            summary.message = (
                f"Progress update sent to {summary.successful} of "
                f"{summary.total_staff} staff members"
            )
            logger.info(
                "progress_fanned_out",
                total_staff=summary.total_staff,
                emails_sent=summary.successful,
                emails_failed=summary.failed,
            )
            return summary
