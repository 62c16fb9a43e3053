"""Email channel: one configured transport behind a single send contract."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog

from infrastructure.exceptions import EmailTransportError
from infrastructure.notifications.channels.base import EmailTransport
from infrastructure.notifications.channels.console import ConsoleTransport
from infrastructure.notifications.channels.remote import (
    RelayTransport,
    ResendTransport,
)
from infrastructure.notifications.models import EmailMessage, EmailSendResult
from infrastructure.operations import OperationResult

if TYPE_CHECKING:
    from infrastructure.configuration.integrations import EmailSettings

logger = structlog.get_logger()

TEST_RECIPIENT = "test@example.com"


def build_transport(email_settings: "EmailSettings") -> EmailTransport:
    """Instantiate the transport named by ``EMAIL_PROVIDER``.

    Args:
        email_settings: Email integration settings

    Returns:
        The configured transport; console for anything unrecognised.
    """
    provider = email_settings.EMAIL_PROVIDER
    if provider == "resend":
        return ResendTransport(
            api_key=email_settings.RESEND_API_KEY,
            sender=email_settings.sender,
            url=email_settings.RESEND_API_URL,
            timeout_seconds=email_settings.EMAIL_TIMEOUT_SECONDS,
        )
    if provider == "relay":
        return RelayTransport(
            url=email_settings.EMAIL_RELAY_URL,
            timeout_seconds=email_settings.EMAIL_TIMEOUT_SECONDS,
        )
    return ConsoleTransport()


class EmailChannel:
    """Sends rendered emails through the configured transport.

    The channel never retries: a failed send raises EmailTransportError so
    the caller can count it against that recipient only.
    """

    def __init__(self, transport: EmailTransport):
        self.transport = transport
        logger.info("initialized_email_channel", provider=transport.transport_name)

    @classmethod
    def from_settings(cls, email_settings: "EmailSettings") -> "EmailChannel":
        return cls(build_transport(email_settings))

    @property
    def provider(self) -> str:
        return self.transport.transport_name

    async def send(self, message: EmailMessage) -> EmailSendResult:
        """Send one message.

        Args:
            message: Rendered email

        Returns:
            EmailSendResult from the transport.

        Raises:
            EmailTransportError: The transport failed.
        """
        try:
            result = await self.transport.send(message)
        except EmailTransportError as e:
            logger.error(
                "email_send_failed",
                provider=e.provider,
                to=str(message.to),
                subject=message.subject,
                status_code=e.status_code,
                error=str(e),
            )
            raise
        except Exception as e:
            logger.error(
                "email_send_failed",
                provider=self.provider,
                to=str(message.to),
                subject=message.subject,
                error=str(e),
            )
            raise EmailTransportError(str(e), self.provider) from e

        logger.info(
            "email_sent",
            provider=result.provider,
            to=str(message.to),
            subject=message.subject,
            message_id=result.message_id,
        )
        return result

    async def test_email_service(self) -> EmailSendResult:
        """Send a fixed test message through the configured transport.

        Returns:
            The transport's result, or a failed result carrying the error.
        """
        sent_at = datetime.now(timezone.utc).isoformat()
        message = EmailMessage(
            to=TEST_RECIPIENT,
            subject="Test Email from Rehabilitation Center System",
            html=(
                "<h2>Email Service Test</h2>"
                f"<p>This is a test email sent through the {self.provider} provider.</p>"
                f"<p>Sent at: {sent_at}</p>"
            ),
            text=(
                "Email Service Test\n\n"
                f"This is a test email sent through the {self.provider} provider.\n"
                f"Sent at: {sent_at}"
            ),
            metadata={"type": "test", "timestamp": sent_at},
        )
        try:
            return await self.send(message)
        except EmailTransportError as e:
            return EmailSendResult(success=False, provider=e.provider, error=str(e))

    def health_check(self) -> OperationResult:
        return self.transport.health_check()
