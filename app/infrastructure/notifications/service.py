"""Notification service for dependency injection.

Facade over the notification store and dispatcher that exposes the
operations callers use: create, remind, list, count, read, acknowledge,
hide and subscribe.
"""

from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Set, TYPE_CHECKING

import structlog

from infrastructure.exceptions import NotificationNotFoundError
from infrastructure.notifications.dispatcher import (
    NotificationDispatcher,
    SubscriberCallback,
)
from infrastructure.notifications.models import (
    Notification,
    NotificationCounts,
    NotificationFilters,
    NotificationPriority,
    NotificationSpec,
    NotificationStats,
    NotificationStatus,
    NotificationType,
    RelatedEntity,
)
from infrastructure.notifications.store import NotificationStore

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = structlog.get_logger()


class NotificationService:
    """Class-based notification service.

    Usage:
        # Via dependency injection
        from infrastructure.services import NotificationServiceDep

        @router.get("/notifications")
        async def list_notifications(service: NotificationServiceDep, uid: str):
            return await service.get_user_notifications(uid)

        # Direct construction
        store = NotificationStore(InMemoryDocumentStore())
        service = NotificationService(store, NotificationDispatcher(store))
    """

    def __init__(
        self,
        store: NotificationStore,
        dispatcher: NotificationDispatcher,
        reminder_lead_minutes: int = 10,
    ):
        self.store = store
        self.dispatcher = dispatcher
        self.reminder_lead_minutes = reminder_lead_minutes
        # Per-recipient ids removed from the caller's view; records are kept
        self._hidden: Dict[str, Set[str]] = {}

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        store: NotificationStore,
        dispatcher: Optional[NotificationDispatcher] = None,
    ) -> "NotificationService":
        dispatcher = dispatcher or NotificationDispatcher(
            store,
            prominent_duration_ms=settings.notifications.prominent_duration_ms,
            confirmation_duration_ms=settings.notifications.confirmation_duration_ms,
        )
        return cls(
            store,
            dispatcher,
            reminder_lead_minutes=settings.notifications.reminder_lead_minutes,
        )

    def subscribe(
        self, recipient_id: str, callback: SubscriberCallback
    ) -> Callable[[], None]:
        """Register a live callback for a recipient; returns the unsubscribe."""
        return self.dispatcher.subscribe(recipient_id, callback)

    async def create_notification(self, spec: NotificationSpec) -> Notification:
        """Persist, enqueue for dispatch and notify live subscribers.

        Args:
            spec: Notification input

        Returns:
            The stored notification (status pending).
        """
        notification = await self.store.create(spec)
        self.dispatcher.enqueue(notification)
        self.dispatcher.notify_subscribers(notification.recipient_id, notification)
        await self.dispatcher.process_queue()
        return notification

    async def create_reminder(
        self,
        patient_id: str,
        session_time: datetime,
        session_type: str,
        message: str = "",
        assigned_buddy: Optional[str] = None,
        assigned_nurse: Optional[str] = None,
    ) -> List[Notification]:
        """Schedule session reminders for the patient's buddy and nurse.

        Reminders fire ``reminder_lead_minutes`` before the session and
        require acknowledgment.

        Returns:
            The created reminders (zero, one or two).
        """
        remind_at = session_time - timedelta(minutes=self.reminder_lead_minutes)
        lead = self.reminder_lead_minutes
        metadata = {
            "sessionTime": session_time.isoformat(),
            "patientId": patient_id,
            "sessionType": session_type,
        }
        targets = [
            (
                assigned_buddy,
                f"You have a {session_type} session with patient in {lead} minutes.",
            ),
            (
                assigned_nurse,
                f"Buddy has a {session_type} session with patient in {lead} minutes.",
            ),
        ]
        reminders = []
        for recipient_id, text in targets:
            if not recipient_id:
                continue
            reminders.append(
                await self.create_notification(
                    NotificationSpec(
                        type=NotificationType.REMINDER,
                        priority=NotificationPriority.MEDIUM,
                        title="Session Reminder",
                        message=f"{text} {message}".strip(),
                        recipient_id=recipient_id,
                        sender_id="system",
                        related_entity=RelatedEntity(kind="session", id=patient_id),
                        scheduled_for=remind_at,
                        requires_acknowledgment=True,
                        metadata=metadata,
                    )
                )
            )
        return reminders

    async def get_user_notifications(
        self,
        recipient_id: str,
        filters: Optional[NotificationFilters] = None,
    ) -> List[Notification]:
        """List notifications for a recipient, newest first, minus hidden ones."""
        hidden = self._hidden.get(recipient_id, set())
        notifications = await self.store.query(recipient_id, filters)
        return [n for n in notifications if n.id not in hidden]

    async def get_notification_stats(self, recipient_id: str) -> NotificationStats:
        notifications = await self.get_user_notifications(recipient_id)
        stats = NotificationStats(total=len(notifications))
        for notification in notifications:
            if not notification.is_read_by(recipient_id):
                stats.unread += 1
            if notification.requires_acknowledgment and not notification.is_acknowledged_by(
                recipient_id
            ):
                stats.unacknowledged += 1
            type_key = notification.type.value
            priority_key = notification.priority.value
            stats.by_type[type_key] = stats.by_type.get(type_key, 0) + 1
            stats.by_priority[priority_key] = stats.by_priority.get(priority_key, 0) + 1
        return stats

    async def get_notification_counts(self, recipient_id: str) -> NotificationCounts:
        notifications = await self.get_user_notifications(recipient_id)
        return NotificationCounts(
            total=len(notifications),
            unread=sum(1 for n in notifications if not n.is_read_by(recipient_id)),
            pending=sum(
                1 for n in notifications if n.status == NotificationStatus.PENDING
            ),
            emergency=sum(
                1 for n in notifications if n.type == NotificationType.EMERGENCY
            ),
        )

    async def mark_as_read(self, notification_id: str, user_id: str) -> Notification:
        return await self.store.mark_read(notification_id, user_id)

    async def acknowledge_notification(
        self, notification_id: str, user_id: str
    ) -> Notification:
        return await self.store.acknowledge(notification_id, user_id)

    async def delete_notification(self, recipient_id: str, notification_id: str) -> None:
        """Hide a notification from the recipient's listings.

        The stored record is left in place for the audit trail.

        Raises:
            NotificationNotFoundError: Unknown id, or addressed to someone else.
        """
        notification = await self.store.get(notification_id)
        if notification.recipient_id != recipient_id:
            raise NotificationNotFoundError(notification_id)
        self._hidden.setdefault(recipient_id, set()).add(notification_id)
        logger.info(
            "notification_hidden",
            notification_id=notification_id,
            recipient_id=recipient_id,
        )

    async def expire_notifications(self) -> int:
        return await self.store.expire_sweep()

    async def shutdown(self) -> None:
        await self.dispatcher.delayed_tasks.shutdown()
