"""Email transport abstract base class.

All transports (Resend HTTP API, local relay, console) implement this
interface so the email channel can swap them by configuration.
"""

from abc import ABC, abstractmethod

from infrastructure.notifications.models import EmailMessage, EmailSendResult
from infrastructure.operations import OperationResult


class EmailTransport(ABC):
    """Abstract base class for email transports.

    Example Implementation:
        class OutboxTransport(EmailTransport):

            @property
            def transport_name(self) -> str:
                return "outbox"

            async def send(self, message: EmailMessage) -> EmailSendResult:
                self.outbox.append(message)
                return EmailSendResult(success=True, provider="outbox")
    """

    @property
    @abstractmethod
    def transport_name(self) -> str:
        """Provider identifier recorded in results and audit logs."""
        pass

    @abstractmethod
    async def send(self, message: EmailMessage) -> EmailSendResult:
        """Hand one message to the provider.

        Args:
            message: Rendered email

        Returns:
            EmailSendResult with success=True and the provider's message id.

        Raises:
            EmailTransportError: The provider rejected the message or could
                not be reached.
        """
        pass

    def health_check(self) -> OperationResult:
        """Report whether the transport is configured to send.

        Returns:
            OperationResult, successful by default.
        """
        return OperationResult.success(
            message=f"{self.transport_name} transport configured"
        )
