"""HTTP email transports: the Resend API and the local relay service."""

import asyncio
from typing import Any, Dict, Optional

import requests
import structlog

from infrastructure.exceptions import EmailTransportError
from infrastructure.notifications.channels.base import EmailTransport
from infrastructure.notifications.models import EmailMessage, EmailSendResult
from infrastructure.operations import OperationResult, classify_http_error

logger = structlog.get_logger()


class HttpEmailTransport(EmailTransport):
    """Shared POST-and-parse logic for JSON email endpoints.

    Subclasses provide the endpoint, headers, payload and the key holding
    the provider's message id.
    """

    message_id_key = "id"

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def payload(self, message: EmailMessage) -> Dict[str, Any]:
        return {
            "to": str(message.to),
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }

    def _post(self, message: EmailMessage) -> Dict[str, Any]:
        response = self.session.post(
            self.url,
            json=self.payload(message),
            headers=self.headers(),
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise EmailTransportError(
                f"{self.transport_name} returned a non-JSON response",
                self.transport_name,
                response.status_code,
            ) from e

    async def send(self, message: EmailMessage) -> EmailSendResult:
        try:
            body = await asyncio.to_thread(self._post, message)
        except requests.RequestException as e:
            classified = classify_http_error(e, provider=self.transport_name)
            status_code = e.response.status_code if e.response is not None else None
            logger.warning(
                "email_transport_request_failed",
                provider=self.transport_name,
                status_code=status_code,
                error_code=classified.error_code,
                error=classified.message,
            )
            raise EmailTransportError(
                classified.message, self.transport_name, status_code
            ) from e

        return EmailSendResult(
            success=True,
            provider=self.transport_name,
            message_id=body.get(self.message_id_key),
        )


class ResendTransport(HttpEmailTransport):
    """Sends through the Resend HTTP API (``POST /emails``)."""

    message_id_key = "id"

    def __init__(
        self,
        api_key: Optional[str],
        sender: str,
        url: str = "https://api.resend.com/emails",
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(url, timeout_seconds, session)
        self.api_key = api_key
        self.sender = sender

    @property
    def transport_name(self) -> str:
        return "resend"

    def headers(self) -> Dict[str, str]:
        return {**super().headers(), "Authorization": f"Bearer {self.api_key}"}

    def payload(self, message: EmailMessage) -> Dict[str, Any]:
        return {
            "from": self.sender,
            "to": [str(message.to)],
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }

    async def send(self, message: EmailMessage) -> EmailSendResult:
        if not self.api_key:
            raise EmailTransportError("RESEND_API_KEY is not configured", "resend")
        return await super().send(message)

    def health_check(self) -> OperationResult:
        if not self.api_key:
            return OperationResult.permanent_error(
                "RESEND_API_KEY is not configured", error_code="MISSING_API_KEY"
            )
        return super().health_check()


class RelayTransport(HttpEmailTransport):
    """Sends through the local SMTP relay service."""

    message_id_key = "messageId"

    @property
    def transport_name(self) -> str:
        return "relay"
