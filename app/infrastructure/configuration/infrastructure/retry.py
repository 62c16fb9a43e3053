"""Retry wrapper infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class RetrySettings(InfrastructureSettings):
    """Retry configuration for document store calls.

    Every document store call made by the notification store, the staff
    resolver and the email audit log goes through the retry wrapper with
    these settings. Email transport calls are not retried.

    Environment Variables:
        RETRY_MAX_ATTEMPTS: Total attempts including the first (default: 3)
        RETRY_BASE_DELAY_MS: Base backoff delay in milliseconds (default: 1000)

    Exponential Backoff:
        Delay after attempt k (1-based) is base_delay_ms * 2^(k-1).

        Example with defaults (base=1000ms, max_attempts=3):
            After attempt 1: 1000ms
            After attempt 2: 2000ms
            After attempt 3: no wait, the last error is raised

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        attempts = settings.retry.max_attempts
        ```
    """

    max_attempts: int = Field(
        default=3,
        alias="RETRY_MAX_ATTEMPTS",
        ge=1,
        description="Total attempts for a document store call",
    )
    base_delay_ms: int = Field(
        default=1000,
        alias="RETRY_BASE_DELAY_MS",
        ge=0,
        description="Base delay for exponential backoff (milliseconds)",
    )
