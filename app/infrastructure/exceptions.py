"""Custom exceptions for CareBridge.

Expected outcomes (a staff member that cannot be resolved, an email the
provider rejected) are reported as OperationResult values. Exceptions are
reserved for programming errors and for failures that callers must handle
explicitly.
"""

from typing import Optional


class CareBridgeError(Exception):
    """Base exception for all CareBridge errors.

    Example:
        try:
            await store.update("notifications", notification_id, changes)
        except CareBridgeError as e:
            logger.error("store_update_failed", error=str(e))
    """


class DocumentValidationError(CareBridgeError, ValueError):
    """Raised for malformed document store calls.

    Missing collection names, missing document ids and malformed filters are
    programming errors; they are raised immediately and never retried.
    """


class DocumentNotFoundError(CareBridgeError):
    """Raised when updating a document that does not exist."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"Document '{doc_id}' not found in '{collection}'")
        self.collection = collection
        self.doc_id = doc_id


class NotificationNotFoundError(CareBridgeError):
    """Raised when a notification id does not resolve to a stored record."""

    def __init__(self, notification_id: str):
        super().__init__(f"Notification '{notification_id}' not found")
        self.notification_id = notification_id


class EmailTransportError(CareBridgeError):
    """Raised by an email transport when a message could not be handed off.

    Attributes:
        provider: Name of the transport that failed
        status_code: HTTP status returned by the provider, when there was one
    """

    def __init__(
        self, message: str, provider: str, status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class AuthenticationError(CareBridgeError):
    """Raised when an identity token cannot be verified."""
