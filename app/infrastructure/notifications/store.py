"""Notification persistence on top of the document store."""

import secrets
import time
from datetime import datetime
from typing import List, Optional

import structlog

from infrastructure.exceptions import NotificationNotFoundError
from infrastructure.notifications.models import (
    Notification,
    NotificationFilters,
    NotificationSpec,
    NotificationStatus,
    as_utc,
    utcnow,
)
from infrastructure.persistence import DocumentStore, OrderBy, QueryFilter, SortDirection

logger = structlog.get_logger()

NOTIFICATIONS_COLLECTION = "notifications"


def new_notification_id() -> str:
    """Time-ordered id: epoch milliseconds plus a random suffix."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class NotificationStore:
    """Creates, reads and updates notification records.

    Every call goes through the document store, which applies the retry
    policy. ``mark_read`` and ``acknowledge`` are idempotent per user.
    """

    def __init__(
        self,
        documents: DocumentStore,
        collection: str = NOTIFICATIONS_COLLECTION,
    ):
        self.documents = documents
        self.collection = collection

    async def create(self, spec: NotificationSpec) -> Notification:
        """Persist a new pending notification built from ``spec``.

        Args:
            spec: Notification input. Type defaults to system_alert and
                priority to medium.

        Returns:
            The stored notification.
        """
        now = utcnow()
        notification = Notification(
            id=new_notification_id(),
            type=spec.type,
            priority=spec.priority,
            title=spec.title,
            message=spec.message,
            recipient_id=spec.recipient_id,
            sender_id=spec.sender_id,
            related_entity=spec.related_entity,
            metadata=dict(spec.metadata),
            status=NotificationStatus.PENDING,
            created_at=now,
            scheduled_for=spec.scheduled_for or now,
            expires_at=spec.expires_at,
            requires_acknowledgment=spec.requires_acknowledgment,
        )
        await self.documents.create(
            self.collection, notification.to_document(), doc_id=notification.id
        )
        logger.info(
            "notification_created",
            notification_id=notification.id,
            recipient_id=notification.recipient_id,
            type=notification.type.value,
            priority=notification.priority.value,
        )
        return notification

    async def get(self, notification_id: str) -> Notification:
        """Load a notification.

        Raises:
            NotificationNotFoundError: No record with that id.
        """
        document = await self.documents.read(self.collection, notification_id)
        if document is None:
            raise NotificationNotFoundError(notification_id)
        return Notification.from_document(document)

    async def mark_sent(
        self, notification_id: str, sent_at: Optional[datetime] = None
    ) -> datetime:
        sent_at = sent_at or utcnow()
        await self.documents.update(
            self.collection,
            notification_id,
            {"status": NotificationStatus.SENT.value, "sentAt": sent_at},
        )
        return sent_at

    async def mark_read(self, notification_id: str, user_id: str) -> Notification:
        """Record that ``user_id`` has read the notification.

        The first reader also moves ``status`` to read. Repeated calls for
        the same user change nothing.
        """
        notification = await self.get(notification_id)
        if notification.is_read_by(user_id):
            return notification

        changes = {"readBy": [*notification.read_by, user_id]}
        if not notification.read_by:
            changes["status"] = NotificationStatus.READ.value
        await self.documents.update(self.collection, notification_id, changes)
        logger.info(
            "notification_read", notification_id=notification_id, user_id=user_id
        )
        return await self.get(notification_id)

    async def acknowledge(self, notification_id: str, user_id: str) -> Notification:
        """Record that ``user_id`` has acknowledged the notification.

        A new acknowledger always moves ``status`` to acknowledged. Repeated
        calls for the same user change nothing.
        """
        notification = await self.get(notification_id)
        if notification.is_acknowledged_by(user_id):
            return notification

        await self.documents.update(
            self.collection,
            notification_id,
            {
                "acknowledgedBy": [*notification.acknowledged_by, user_id],
                "status": NotificationStatus.ACKNOWLEDGED.value,
            },
        )
        logger.info(
            "notification_acknowledged",
            notification_id=notification_id,
            user_id=user_id,
        )
        return await self.get(notification_id)

    async def query(
        self,
        recipient_id: str,
        filters: Optional[NotificationFilters] = None,
    ) -> List[Notification]:
        """List a recipient's notifications, newest first.

        Args:
            recipient_id: Recipient to list for
            filters: Optional type/status/priority equality filters

        Returns:
            Notifications ordered by creation time, descending.
        """
        filters = filters or NotificationFilters()
        conditions = [QueryFilter("recipientId", "==", recipient_id)]
        if filters.status is not None:
            conditions.append(QueryFilter("status", "==", filters.status.value))
        if filters.type is not None:
            conditions.append(QueryFilter("type", "==", filters.type.value))
        if filters.priority is not None:
            conditions.append(QueryFilter("priority", "==", filters.priority.value))

        documents = await self.documents.query(
            self.collection,
            conditions,
            order_by=OrderBy("createdAt", SortDirection.DESCENDING),
        )
        return [Notification.from_document(document) for document in documents]

    async def expire_sweep(self, now: Optional[datetime] = None) -> int:
        """Mark every notification whose ``expiresAt`` has passed as expired.

        Returns:
            Number of notifications transitioned.
        """
        now = as_utc(now) or utcnow()
        documents = await self.documents.query(
            self.collection, [QueryFilter("expiresAt", "<", now)]
        )
        expired = 0
        for document in documents:
            if document.get("status") == NotificationStatus.EXPIRED.value:
                continue
            await self.documents.update(
                self.collection,
                document["id"],
                {"status": NotificationStatus.EXPIRED.value},
            )
            expired += 1
        logger.info("notification_expiry_sweep_completed", expired=expired)
        return expired
