"""Structured logging for CareBridge.

Usage:
    from infrastructure.logging import get_module_logger

    logger = get_module_logger()
    logger.info("staff_resolved", role="nurse", staff_id="N7")

Orchestrators wrap a workflow in ``bind_request_context`` so every event it
logs carries the same ``correlation_id``.
"""

from infrastructure.logging.context import (
    bind_request_context,
    clear_request_context,
    get_correlation_id,
)
from infrastructure.logging.setup import configure_logging, get_module_logger

__all__ = [
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "get_correlation_id",
    "get_module_logger",
]
