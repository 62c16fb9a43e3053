"""Error classifiers for provider exceptions.

Converts exceptions raised by the ``requests`` based email transports into
OperationResult objects so transports can report failures as values.

Usage:
    from infrastructure.operations.classifiers import classify_http_error

    try:
        response = requests.post(url, json=payload, timeout=10)
        response.raise_for_status()
    except requests.RequestException as exc:
        return classify_http_error(exc, provider="resend")
"""

from typing import Optional

import requests

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

DEFAULT_RETRY_AFTER_SECONDS = 60


def _retry_after(response: requests.Response) -> int:
    header_value = response.headers.get("Retry-After")
    if header_value:
        try:
            return int(header_value)
        except (TypeError, ValueError):
            return DEFAULT_RETRY_AFTER_SECONDS
    return DEFAULT_RETRY_AFTER_SECONDS


def classify_http_error(exc: Exception, provider: str = "http") -> OperationResult:
    """Classify a ``requests`` exception into an OperationResult.

    Status Code Mapping:
    - no response (connection error, timeout) → TRANSIENT_ERROR
    - 429 → TRANSIENT_ERROR with retry_after
    - 401, 403 → UNAUTHORIZED
    - 404 → NOT_FOUND
    - 5xx → TRANSIENT_ERROR
    - other 4xx → PERMANENT_ERROR

    Args:
        exc: Exception raised while calling a provider over HTTP
        provider: Provider name used in messages

    Returns:
        OperationResult describing the failure
    """
    response: Optional[requests.Response] = getattr(exc, "response", None)
    if response is None:
        return OperationResult.transient_error(
            f"{provider} connection error: {type(exc).__name__}: {exc}",
            error_code="CONNECTION_ERROR",
        )

    status_code = response.status_code

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            f"{provider} rate limited",
            error_code="RATE_LIMITED",
            retry_after=_retry_after(response),
        )

    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"{provider} rejected credentials ({status_code})",
            error_code="UNAUTHORIZED",
        )

    if status_code == 404:
        return OperationResult.not_found(f"{provider} endpoint not found")

    if 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"{provider} server error ({status_code})",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"{provider} client error ({status_code}): {response.text[:200]}",
        error_code="HTTP_ERROR",
    )
