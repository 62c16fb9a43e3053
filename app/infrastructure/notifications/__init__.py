"""In-app notifications and transactional email.

Provides:
- NotificationStore: persisted notification records with read and
  acknowledgment tracking
- NotificationDispatcher: subscriber callbacks, FIFO dispatch queue and
  priority-based presentation
- NotificationService: the facade used by API routes and orchestrators
- EmailChannel: one configured email transport behind a single send call

Usage:
    from infrastructure.notifications import (
        NotificationPriority,
        NotificationSpec,
        NotificationType,
    )

    notification = await notification_service.create_notification(
        NotificationSpec(
            recipient_id="nurse-1",
            type=NotificationType.EMERGENCY,
            priority=NotificationPriority.CRITICAL,
            title="Emergency",
            message="EMERGENCY: fall - Patient found on floor.",
            requires_acknowledgment=True,
        )
    )
"""

from infrastructure.notifications.models import (
    EmailMessage,
    EmailSendResult,
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
from infrastructure.notifications.presenter import (
    LoggingPresenter,
    Presentation,
    PresentationStyle,
    Presenter,
    RecordingPresenter,
    presentation_for,
)
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.service import NotificationService
from infrastructure.notifications.channels import (
    ConsoleTransport,
    EmailChannel,
    EmailTransport,
    RelayTransport,
    ResendTransport,
    build_transport,
)

__all__ = [
    # Models
    "EmailMessage",
    "EmailSendResult",
    "Notification",
    "NotificationCounts",
    "NotificationFilters",
    "NotificationPriority",
    "NotificationSpec",
    "NotificationStats",
    "NotificationStatus",
    "NotificationType",
    "RelatedEntity",
    # Store and dispatch
    "NotificationStore",
    "NotificationDispatcher",
    "NotificationService",
    # Presentation
    "LoggingPresenter",
    "Presentation",
    "PresentationStyle",
    "Presenter",
    "RecordingPresenter",
    "presentation_for",
    # Email
    "ConsoleTransport",
    "EmailChannel",
    "EmailTransport",
    "RelayTransport",
    "ResendTransport",
    "build_transport",
]
