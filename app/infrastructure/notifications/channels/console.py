"""Console email transport: logs messages instead of sending them."""

import uuid

import structlog

from infrastructure.notifications.channels.base import EmailTransport
from infrastructure.notifications.models import EmailMessage, EmailSendResult

logger = structlog.get_logger()

PREVIEW_LENGTH = 200


class ConsoleTransport(EmailTransport):
    """Development sink; every message succeeds."""

    @property
    def transport_name(self) -> str:
        return "console"

    async def send(self, message: EmailMessage) -> EmailSendResult:
        message_id = f"console-{uuid.uuid4().hex[:12]}"
        logger.info(
            "console_email",
            to=str(message.to),
            subject=message.subject,
            text_preview=message.text[:PREVIEW_LENGTH],
            message_id=message_id,
        )
        return EmailSendResult(
            success=True, provider=self.transport_name, message_id=message_id
        )
