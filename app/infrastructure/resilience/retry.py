"""Bounded exponential-backoff retry wrapper.

Every document store call is routed through :func:`retry_operation`. The
wrapper does not distinguish retryable from permanent failures: any
exception triggers the next attempt, and the last exception propagates
unchanged once attempts are exhausted.

Usage:
    from infrastructure.resilience import RetryPolicy, retry_operation

    doc = await retry_operation(lambda: client.read("patients", "p1"))

    policy = RetryPolicy(max_attempts=5, base_delay_ms=200)
    await retry_operation(send, policy=policy)
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt count and backoff base for :func:`retry_operation`.

    Attributes:
        max_attempts: Total attempts, including the first call
        base_delay_ms: Delay after the first failure; doubles after each
            subsequent failure
    """

    max_attempts: int = 3
    base_delay_ms: int = 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must not be negative")

    def delay_seconds(self, attempt: int) -> float:
        """Backoff after the given 1-based attempt: base * 2^(attempt-1)."""
        return self.base_delay_ms * (2 ** (attempt - 1)) / 1000.0

    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        """Build a policy from ``settings.retry``."""
        return cls(
            max_attempts=settings.retry.max_attempts,
            base_delay_ms=settings.retry.base_delay_ms,
        )


DEFAULT_RETRY_POLICY = RetryPolicy()


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    operation_name: Optional[str] = None,
) -> T:
    """Run ``operation`` until it succeeds or attempts are exhausted.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per call
        policy: Attempt count and backoff base. Defaults to 3 attempts, 1000ms.
        operation_name: Name used in log events

    Returns:
        The operation's result.

    Raises:
        Exception: The exception raised by the final attempt, unmodified.
    """
    policy = policy or DEFAULT_RETRY_POLICY
    name = operation_name or getattr(operation, "__name__", "operation")

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= policy.max_attempts:
                logger.error(
                    "retry_attempts_exhausted",
                    operation=name,
                    attempts=attempt,
                    error=str(e),
                )
                raise
            delay = policy.delay_seconds(attempt)
            logger.warning(
                "retry_attempt_failed",
                operation=name,
                attempt=attempt,
                max_attempts=policy.max_attempts,
                delay_seconds=delay,
                error=str(e),
            )
            await asyncio.sleep(delay)
            attempt += 1
