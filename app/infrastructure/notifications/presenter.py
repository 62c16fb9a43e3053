"""On-screen presentation of dispatched notifications.

The dispatcher picks a presentation from the notification's priority and
hands both to a Presenter. The default presenter only logs; a web or
push front end can plug in its own.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import structlog

from infrastructure.notifications.models import Notification, NotificationPriority

logger = structlog.get_logger()


class PresentationStyle(str, Enum):
    INTERRUPT = "interrupt"
    PROMINENT = "prominent"
    CONFIRMATION = "confirmation"


@dataclass(frozen=True)
class Presentation:
    """How a notification is surfaced.

    Attributes:
        style: Visual treatment
        duration_ms: Auto-dismiss delay; None means it stays until dismissed
        position: Screen anchor hint
    """

    style: PresentationStyle
    duration_ms: Optional[int]
    position: str

    @property
    def auto_dismiss(self) -> bool:
        return self.duration_ms is not None


def presentation_for(
    priority: NotificationPriority,
    prominent_duration_ms: int = 8000,
    confirmation_duration_ms: int = 5000,
) -> Presentation:
    """Select the presentation for a priority.

    critical and urgent interrupt with no auto-dismiss, high is prominent
    with the longer timeout, everything else is a short confirmation.
    """
    if priority >= NotificationPriority.URGENT:
        return Presentation(PresentationStyle.INTERRUPT, None, "top-center")
    if priority == NotificationPriority.HIGH:
        return Presentation(
            PresentationStyle.PROMINENT, prominent_duration_ms, "top-right"
        )
    return Presentation(
        PresentationStyle.CONFIRMATION, confirmation_duration_ms, "top-right"
    )


class Presenter(ABC):
    """Surface a dispatched notification to its recipient."""

    @abstractmethod
    def present(self, notification: Notification, presentation: Presentation) -> None:
        pass


class LoggingPresenter(Presenter):
    """Writes each presentation to the structured log."""

    def present(self, notification: Notification, presentation: Presentation) -> None:
        logger.info(
            "notification_presented",
            notification_id=notification.id,
            recipient_id=notification.recipient_id,
            style=presentation.style.value,
            duration_ms=presentation.duration_ms,
            position=presentation.position,
        )


class RecordingPresenter(Presenter):
    """Keeps every presentation in memory, for tests and previews."""

    def __init__(self) -> None:
        self.presented: List[Tuple[Notification, Presentation]] = []

    def present(self, notification: Notification, presentation: Presentation) -> None:
        self.presented.append((notification, presentation))
