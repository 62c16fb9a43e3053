"""Resilience patterns.

Currently a single bounded exponential-backoff retry wrapper.
"""

from infrastructure.resilience.retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    retry_operation,
)

__all__ = [
    "DEFAULT_RETRY_POLICY",
    "RetryPolicy",
    "retry_operation",
]
