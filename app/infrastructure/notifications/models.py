"""Notification and email message models.

Notifications are stored as camelCase documents (``recipientId``,
``readBy``...) so the same records can be read by the web client; the
Python side uses snake_case attributes with camelCase aliases.

``read_by`` and ``acknowledged_by`` are the source of truth for who has
seen or acknowledged a notification. ``status`` is a display hint that
summarises the latest lifecycle event and can disagree with them, e.g. a
read after an acknowledgment leaves ``status`` at ``read``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class NotificationType(str, Enum):
    REMINDER = "reminder"
    EMERGENCY = "emergency"
    SESSION_UPDATE = "session_update"
    CARE_PLAN_UPDATE = "care_plan_update"
    BUDDY_ASSIGNMENT = "buddy_assignment"
    PROGRESS_UPDATE = "progress_update"
    SYSTEM_ALERT = "system_alert"


class NotificationPriority(str, Enum):
    """Notification priority, ordered low < medium < high < urgent < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, NotificationPriority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, NotificationPriority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, NotificationPriority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, NotificationPriority):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_RANK = {
    NotificationPriority.LOW: 0,
    NotificationPriority.MEDIUM: 1,
    NotificationPriority.HIGH: 2,
    NotificationPriority.URGENT: 3,
    NotificationPriority.CRITICAL: 4,
}


class NotificationStatus(str, Enum):
    """Lifecycle hint: pending -> sent -> delivered, plus read/acknowledged/expired."""

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    ACKNOWLEDGED = "acknowledged"
    EXPIRED = "expired"


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RelatedEntity(CamelModel):
    """What a notification is about, e.g. ``{kind: "patient", id: "p1"}``."""

    kind: str = Field(alias="type")
    id: str


class NotificationSpec(CamelModel):
    """Input for creating a notification.

    Attributes:
        recipient_id: User the notification is addressed to (required)
        title: Short headline
        message: Body text (required, non-empty)
        type: Defaults to SYSTEM_ALERT
        priority: Defaults to MEDIUM
        sender_id: Originating user, or "system"
        related_entity: Optional pointer to the subject record
        metadata: Free-form context
        scheduled_for: Dispatch time; now when omitted
        expires_at: After this time the expiry sweep marks it expired
        requires_acknowledgment: Whether the recipient must acknowledge it
    """

    recipient_id: str
    title: str = ""
    message: str
    type: NotificationType = NotificationType.SYSTEM_ALERT
    priority: NotificationPriority = NotificationPriority.MEDIUM
    sender_id: str = "system"
    related_entity: Optional[RelatedEntity] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    scheduled_for: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    requires_acknowledgment: bool = False

    @field_validator("recipient_id")
    @classmethod
    def validate_recipient(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("recipient_id cannot be empty")
        return v

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Notification message cannot be empty")
        return v

    @field_validator("scheduled_for", "expires_at")
    @classmethod
    def validate_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class Notification(CamelModel):
    """A persisted notification record."""

    id: str
    type: NotificationType
    priority: NotificationPriority
    title: str = ""
    message: str
    recipient_id: str
    sender_id: str = "system"
    related_entity: Optional[RelatedEntity] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    status: NotificationStatus = NotificationStatus.PENDING
    created_at: datetime
    scheduled_for: datetime
    expires_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    requires_acknowledgment: bool = False
    acknowledged_by: List[str] = Field(default_factory=list)
    read_by: List[str] = Field(default_factory=list)

    @field_validator("created_at", "scheduled_for", "expires_at", "sent_at")
    @classmethod
    def validate_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Notification":
        return cls.model_validate(document)

    def to_document(self) -> Dict[str, Any]:
        """Store representation: camelCase keys, enum values, no ``id``."""
        return _plain(self.model_dump(by_alias=True, exclude={"id"}))

    def is_read_by(self, user_id: str) -> bool:
        return user_id in self.read_by

    def is_acknowledged_by(self, user_id: str) -> bool:
        return user_id in self.acknowledged_by

    def is_due(self, now: Optional[datetime] = None) -> bool:
        return self.scheduled_for <= as_utc(now or utcnow())


class NotificationFilters(CamelModel):
    """Optional equality filters for listing a recipient's notifications."""

    type: Optional[NotificationType] = None
    status: Optional[NotificationStatus] = None
    priority: Optional[NotificationPriority] = None


class NotificationStats(CamelModel):
    total: int = 0
    unread: int = 0
    unacknowledged: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_priority: Dict[str, int] = Field(default_factory=dict)


class NotificationCounts(CamelModel):
    total: int = 0
    unread: int = 0
    pending: int = 0
    emergency: int = 0


class EmailMessage(BaseModel):
    """A rendered transactional email.

    Attributes:
        to: Recipient address (validated with EmailStr)
        subject: Subject line
        html: HTML body
        text: Plain-text body
        priority: Priority tag passed through to the audit trail
        metadata: Context such as type, recipientId, recipientRole, patientId
    """

    to: EmailStr
    subject: str
    html: str
    text: str
    priority: str = "normal"
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Email subject cannot be empty")
        return v


class EmailSendResult(BaseModel):
    """Outcome reported by an email transport for one message."""

    success: bool
    provider: str
    message_id: Optional[str] = None
    error: Optional[str] = None
