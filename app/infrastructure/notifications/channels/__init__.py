"""Email transports and the email channel."""

from infrastructure.notifications.channels.base import EmailTransport
from infrastructure.notifications.channels.console import ConsoleTransport
from infrastructure.notifications.channels.email import EmailChannel, build_transport
from infrastructure.notifications.channels.remote import (
    RelayTransport,
    ResendTransport,
)

__all__ = [
    "ConsoleTransport",
    "EmailChannel",
    "EmailTransport",
    "RelayTransport",
    "ResendTransport",
    "build_transport",
]
