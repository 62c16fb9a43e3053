"""Outcome codes shared by staff lookups, email transports and HTTP clients."""

from enum import Enum


class OperationStatus(Enum):
    """How an operation ended.

    A staff lookup that exhausts every strategy ends NOT_FOUND. Email
    provider failures are classified by HTTP status: 429, 5xx and dropped
    connections are TRANSIENT_ERROR, a rejected API key is UNAUTHORIZED and
    any other 4xx is PERMANENT_ERROR.
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
