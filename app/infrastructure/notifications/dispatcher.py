"""Notification dispatcher.

Turns persisted notifications into observable effects: the record is
marked sent, a presentation is chosen from its priority, and every
subscriber callback registered for the recipient is invoked.

Usage Example:
    dispatcher = NotificationDispatcher(store, presenter=LoggingPresenter())

    unsubscribe = dispatcher.subscribe("nurse-1", on_notification)
    dispatcher.enqueue(notification)
    await dispatcher.process_queue()
    unsubscribe()
"""

from collections import deque
from typing import Callable, Deque, Dict, List, Optional

import structlog

from infrastructure.notifications.models import Notification, NotificationStatus
from infrastructure.notifications.presenter import (
    LoggingPresenter,
    Presenter,
    presentation_for,
)
from infrastructure.notifications.store import NotificationStore
from infrastructure.scheduling import DelayedTaskQueue

logger = structlog.get_logger()

SubscriberCallback = Callable[[Notification], None]


class NotificationDispatcher:
    """Subscriber registry, FIFO dispatch queue and priority presentation.

    The queue is drained by one loop at a time; ``is_processing`` keeps a
    second caller from starting a concurrent drain on the same event loop.
    Notifications scheduled for the future are handed to the delayed task
    queue under their own id.

    Attributes:
        store: Notification persistence
        presenter: Presentation sink
        delayed_tasks: Timer queue for future-dated notifications
        is_processing: True while the queue is being drained
    """

    def __init__(
        self,
        store: NotificationStore,
        presenter: Optional[Presenter] = None,
        delayed_tasks: Optional[DelayedTaskQueue] = None,
        prominent_duration_ms: int = 8000,
        confirmation_duration_ms: int = 5000,
    ):
        self.store = store
        self.presenter = presenter or LoggingPresenter()
        self.delayed_tasks = delayed_tasks or DelayedTaskQueue()
        self.prominent_duration_ms = prominent_duration_ms
        self.confirmation_duration_ms = confirmation_duration_ms
        self.is_processing = False
        self._queue: Deque[Notification] = deque()
        self._subscribers: Dict[str, List[SubscriberCallback]] = {}

    def subscribe(
        self, recipient_id: str, callback: SubscriberCallback
    ) -> Callable[[], None]:
        """Register ``callback`` for a recipient.

        Returns:
            A callable that removes the registration.
        """
        self._subscribers.setdefault(recipient_id, []).append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(recipient_id, callback)

        return unsubscribe

    def unsubscribe(self, recipient_id: str, callback: SubscriberCallback) -> None:
        callbacks = self._subscribers.get(recipient_id)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)
            if not callbacks:
                del self._subscribers[recipient_id]

    def subscriber_count(self, recipient_id: str) -> int:
        return len(self._subscribers.get(recipient_id, []))

    def notify_subscribers(self, recipient_id: str, notification: Notification) -> int:
        """Invoke every callback for the recipient.

        A failing callback is logged and skipped.

        Returns:
            Number of callbacks that completed without raising.
        """
        delivered = 0
        for callback in list(self._subscribers.get(recipient_id, [])):
            try:
                callback(notification)
                delivered += 1
            except Exception as e:
                logger.error(
                    "subscriber_callback_failed",
                    recipient_id=recipient_id,
                    notification_id=notification.id,
                    error=str(e),
                    exc_info=True,
                )
        return delivered

    def enqueue(self, notification: Notification) -> None:
        self._queue.append(notification)

    @property
    def queued(self) -> int:
        return len(self._queue)

    async def process_queue(self) -> None:
        """Drain the queue in FIFO order.

        Due notifications are dispatched now; future ones are scheduled on
        the delayed task queue. Failures are logged per notification.
        """
        if self.is_processing or not self._queue:
            return

        self.is_processing = True
        try:
            while self._queue:
                notification = self._queue.popleft()
                try:
                    if notification.is_due():
                        await self.dispatch(notification)
                    else:
                        self.schedule(notification)
                except Exception as e:
                    logger.error(
                        "notification_dispatch_failed",
                        notification_id=notification.id,
                        error=str(e),
                    )
        finally:
            self.is_processing = False

    def schedule(self, notification: Notification) -> None:
        """Dispatch ``notification`` at its ``scheduled_for`` time."""
        self.delayed_tasks.schedule(
            notification.id,
            notification.scheduled_for,
            lambda: self.dispatch(notification),
        )
        logger.info(
            "notification_scheduled",
            notification_id=notification.id,
            scheduled_for=notification.scheduled_for.isoformat(),
        )

    def cancel_scheduled(self, notification_id: str) -> bool:
        return self.delayed_tasks.cancel(notification_id)

    async def dispatch(self, notification: Notification) -> Notification:
        """Mark sent, present by priority and fan out to subscribers.

        Returns:
            The notification with its sent status and timestamp.
        """
        sent_at = await self.store.mark_sent(notification.id)
        notification = notification.model_copy(
            update={"status": NotificationStatus.SENT, "sent_at": sent_at}
        )

        presentation = presentation_for(
            notification.priority,
            self.prominent_duration_ms,
            self.confirmation_duration_ms,
        )
        try:
            self.presenter.present(notification, presentation)
        except Exception as e:
            logger.error(
                "notification_presentation_failed",
                notification_id=notification.id,
                error=str(e),
            )

        delivered = self.notify_subscribers(notification.recipient_id, notification)
        logger.info(
            "notification_dispatched",
            notification_id=notification.id,
            recipient_id=notification.recipient_id,
            priority=notification.priority.value,
            style=presentation.style.value,
            subscribers_notified=delivered,
        )
        return notification
