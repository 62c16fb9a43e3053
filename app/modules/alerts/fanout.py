"""Per-recipient fan-out over the in-app and email channels.

Every notification and every email for every recipient runs as its own
coroutine; all of them are awaited together and each outcome is kept, so
one recipient's failure never hides another recipient's success.
"""

import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    EmailChannel,
    EmailMessage,
    EmailSendResult,
    Notification,
    NotificationService,
    NotificationSpec,
)
from infrastructure.notifications.models import utcnow
from modules.alerts.audit import EmailAuditLog
from modules.alerts.models import RecipientOutcome
from modules.alerts.templates import RenderedEmail
from modules.care_team import StaffIdentity

logger = get_module_logger()

NotificationBuilder = Callable[[StaffIdentity], NotificationSpec]
EmailBuilder = Callable[[StaffIdentity], RenderedEmail]


async def settle_all(awaitables: Iterable[Awaitable[Any]]) -> List[Any]:
    """Await everything; failures come back as exception objects in place."""
    return list(await asyncio.gather(*awaitables, return_exceptions=True))


class FanOut:
    """Delivers one event to a list of resolved staff.

    Args:
        notifications: In-app notification service
        email: Email channel
        audit: Email audit log
    """

    def __init__(
        self,
        notifications: NotificationService,
        email: EmailChannel,
        audit: EmailAuditLog,
    ):
        self.notifications = notifications
        self.email = email
        self.audit = audit

    async def deliver(
        self,
        patient_id: str,
        recipients: List[StaffIdentity],
        email_kind: str,
        build_email: EmailBuilder,
        build_notification: Optional[NotificationBuilder] = None,
        email_priority: str = "normal",
    ) -> List[RecipientOutcome]:
        """Send to every recipient on both channels concurrently.

        Args:
            patient_id: Patient the event is about
            recipients: Resolved staff
            email_kind: assignment, emergency or progress
            build_email: Renders the email for one recipient
            build_notification: Builds the in-app notification for one
                recipient; no notifications are created when omitted
            email_priority: Priority tag carried on the email

        Returns:
            One outcome per recipient, in recipient order.
        """
        notify_jobs = [
            self._notify(build_notification, staff) if build_notification else _skip()
            for staff in recipients
        ]
        email_jobs = [
            self._email(patient_id, staff, email_kind, build_email, email_priority)
            for staff in recipients
        ]
        settled = await settle_all(notify_jobs + email_jobs)
        notified, emailed = settled[: len(recipients)], settled[len(recipients) :]

        outcomes = []
        for staff, notification, sent in zip(recipients, notified, emailed):
            outcome = RecipientOutcome(staff_id=staff.id, name=staff.name, role=staff.role)
            if isinstance(notification, BaseException):
                outcome.notification_error = str(notification)
            elif notification is not None:
                outcome.notification_id = notification.id
            if isinstance(sent, BaseException):
                outcome.email_error = str(sent)
                outcome.provider = getattr(sent, "provider", self.email.provider)
            else:
                outcome.email_sent = sent.success
                outcome.provider = sent.provider
                outcome.message_id = sent.message_id
                outcome.email_error = sent.error
            outcomes.append(outcome)
        return outcomes

    async def _notify(
        self, build_notification: NotificationBuilder, staff: StaffIdentity
    ) -> Notification:
        try:
            return await self.notifications.create_notification(
                build_notification(staff)
            )
        except Exception as e:
            logger.error(
                "fanout_notification_failed",
                recipient_id=staff.id,
                error=str(e),
            )
            raise

    async def _email(
        self,
        patient_id: str,
        staff: StaffIdentity,
        email_kind: str,
        build_email: EmailBuilder,
        priority: str,
    ) -> EmailSendResult:
        try:
            rendered = build_email(staff)
            message = EmailMessage(
                to=staff.email,
                subject=rendered.subject,
                html=rendered.html,
                text=rendered.text,
                priority=priority,
                metadata={
                    "type": email_kind,
                    "recipientId": staff.id,
                    "recipientRole": staff.role.value,
                    "patientId": patient_id,
                    "timestamp": utcnow().isoformat(),
                },
            )
            result = await self.email.send(message)
        except Exception as e:
            await self.audit.record(
                patient_id,
                staff,
                email_kind,
                success=False,
                provider=getattr(e, "provider", self.email.provider),
                error=str(e),
            )
            raise

        await self.audit.record(
            patient_id,
            staff,
            email_kind,
            success=result.success,
            provider=result.provider,
            message_id=result.message_id,
            error=result.error,
        )
        return result


async def _skip() -> None:
    return None
