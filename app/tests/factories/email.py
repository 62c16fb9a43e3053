"""Email test doubles."""

from typing import Iterable, List, Optional, Set

from infrastructure.exceptions import EmailTransportError
from infrastructure.notifications.channels.base import EmailTransport
from infrastructure.notifications.models import EmailMessage, EmailSendResult


class RecordingTransport(EmailTransport):
    """Keeps every attempted message; fails for the configured addresses.

    Attributes:
        sent: Messages the transport accepted
        attempted: Every message handed to ``send``
    """

    def __init__(self, fail_for: Optional[Iterable[str]] = None):
        self.fail_for: Set[str] = set(fail_for or [])
        self.sent: List[EmailMessage] = []
        self.attempted: List[EmailMessage] = []

    @property
    def transport_name(self) -> str:
        return "recording"

    async def send(self, message: EmailMessage) -> EmailSendResult:
        self.attempted.append(message)
        if str(message.to) in self.fail_for:
            raise EmailTransportError("provider outage", "recording", 503)
        self.sent.append(message)
        return EmailSendResult(
            success=True,
            provider="recording",
            message_id=f"msg-{len(self.sent)}",
        )

    def recipients(self) -> List[str]:
        return [str(message.to) for message in self.attempted]
