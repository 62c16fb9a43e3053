"""Infrastructure modules for the carebridge service.

Domain-agnostic building blocks:
- configuration: Settings management (Settings, RetrySettings)
- logging: structlog setup and request context (get_module_logger)
- operations: Operation results and error classification
- resilience: Retry with exponential backoff
- persistence: Document store (in-memory and Firestore)
- scheduling: Process-local delayed tasks
- auth: Firebase identity verification
- notifications: In-app notifications and email transports
- services: Dependency injection providers (get_settings, SettingsDep)
"""

from infrastructure.logging import get_module_logger
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "get_module_logger",
    "OperationResult",
    "OperationStatus",
]
