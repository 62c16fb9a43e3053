"""Infrastructure configuration module - public API.

Centralized configuration for CareBridge using Pydantic BaseSettings with
domain-based organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    RetrySettings: Retry wrapper settings class (for testing)

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    provider = settings.email.EMAIL_PROVIDER
    attempts = settings.retry.max_attempts
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.infrastructure.retry import RetrySettings

__all__ = ["Settings", "RetrySettings"]
