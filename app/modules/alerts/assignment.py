"""Staff assignment workflow.

Contacts only the staff in the slot that changed: an in-app notification
plus an assignment email for each, no acknowledgment required.
"""

from typing import Any, List, Optional

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
from infrastructure.operations import OperationResult
from modules.alerts.fanout import FanOut, settle_all
from modules.alerts.models import (
    AssignmentRequest,
    EmailKind,
    FanOutSummary,
    RecipientOutcome,
)
from modules.alerts.templates import AssignmentEmail, render_assignment
from modules.care_team import StaffIdentity, StaffResolver, StaffRole, normalize_role

logger = get_module_logger()

ALL_ROLES = "all"


def roles_for(assignment_type: Optional[str]) -> List[StaffRole]:
    """Slots an assignment event concerns; ``all`` or empty means every slot."""
    if not assignment_type or assignment_type.strip().lower() == ALL_ROLES:
        return list(StaffRole)
    return [normalize_role(assignment_type)]


class AssignmentOrchestrator:
    def __init__(self, resolver: StaffResolver, fanout: FanOut):
        self.resolver = resolver
        self.fanout = fanout

    async def send_assignment_notification_emails(
        self,
        patient_id: str,
        patient_name: str,
        assigned_doctor: Optional[str] = None,
        assigned_nurse: Optional[str] = None,
        assigned_buddy: Optional[str] = None,
        assignment_type: str = ALL_ROLES,
    ) -> FanOutSummary:
        return await self.handle(
            AssignmentRequest(
                patient_id=patient_id,
                patient_name=patient_name,
                assigned_doctor=assigned_doctor,
                assigned_nurse=assigned_nurse,
                assigned_buddy=assigned_buddy,
                assignment_type=assignment_type,
            )
        )

    async def handle(self, request: AssignmentRequest) -> FanOutSummary:
        """Notify the staff assigned in the slot(s) named by the request.

        Raises:
            ValueError: ``assignment_type`` is not a known role or ``all``.
        """
        roles = roles_for(request.assignment_type)
        references = {
            StaffRole.DOCTOR: request.assigned_doctor,
            StaffRole.NURSE: request.assigned_nurse,
            StaffRole.MEDICAL_BUDDY: request.assigned_buddy,
        }
        with bind_request_context(
            correlation_id=get_correlation_id(),
            workflow="assignment",
            patient_id=request.patient_id,
        ):
            jobs = [
                self.send_assignment_notification(
                    request.patient_id, role, references[role], request.patient_name
                )
                for role in roles
                if references[role]
            ]
            settled = await settle_all(jobs)

            outcomes = []
            for result in settled:
                if isinstance(result, BaseException):
                    logger.error("assignment_slot_failed", error=str(result))
                elif result.is_success:
                    outcomes.append(result.data)

            if not outcomes:
                logger.warning(
                    "assignment_no_recipients",
                    assignment_type=request.assignment_type,
                )
                return FanOutSummary.no_recipients()

            summary = FanOutSummary.from_outcomes(outcomes)
            summary.message = (
                f"Assignment notifications sent to {summary.successful} of "
                f"{summary.total_staff} staff members"
            )
            logger.info(
                "assignment_fanned_out",
                assignment_type=request.assignment_type,
                total_staff=summary.total_staff,
                emails_sent=summary.successful,
                emails_failed=summary.failed,
            )
            return summary

    async def send_assignment_notification(
        self,
        patient_id: str,
        role: Any,
        staff_id: Optional[str],
        patient_name: str,
    ) -> OperationResult:
        """Notify one newly assigned staff member.

        Args:
            patient_id: Patient record id
            role: Role of the assignment (any accepted spelling)
            staff_id: Assignment reference: record key or display name
            patient_name: Patient display name

        Returns:
            OperationResult with the RecipientOutcome, or the resolver's
            NOT_FOUND result when the staff member cannot be contacted.
        """
        resolved = await self.resolver.resolve(staff_id, role)
        if not resolved.is_success:
            logger.warning(
                "assignment_staff_not_found",
                role=str(role),
                staff_id=staff_id,
                reason=resolved.message,
            )
            return resolved

        staff: StaffIdentity = resolved.data
        assigned_at = utcnow()

        def build_email(recipient: StaffIdentity):
            return render_assignment(
                AssignmentEmail(
                    staff_name=recipient.name,
                    role_label=recipient.role.label,
                    patient_name=patient_name,
                    patient_id=patient_id,
                    assigned_at=assigned_at,
                )
            )

        outcomes: List[RecipientOutcome] = await self.fanout.deliver(
            patient_id,
            [staff],
            EmailKind.ASSIGNMENT,
            build_email,
            build_notification=lambda recipient: _assignment_notification(
                recipient, patient_id, patient_name
            ),
        )
        return OperationResult.success(data=outcomes[0], message="Assignment sent")


def _assignment_notification(
    staff: StaffIdentity, patient_id: str, patient_name: str
) -> NotificationSpec:
    notification_type = (
        NotificationType.BUDDY_ASSIGNMENT
        if staff.role is StaffRole.MEDICAL_BUDDY
        else NotificationType.SYSTEM_ALERT
    )
    return NotificationSpec(
        recipient_id=staff.id,
        type=notification_type,
        priority=NotificationPriority.MEDIUM,
        title="New Patient Assignment",
        message=f"You have been assigned as {staff.role.label} for {patient_name}.",
        sender_id="system",
        related_entity=RelatedEntity(kind="patient", id=patient_id),
        requires_acknowledgment=False,
        metadata={"patientId": patient_id, "patientName": patient_name},
    )
