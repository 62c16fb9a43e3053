"""Care alerts feature settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class AlertsFeatureSettings(FeatureSettings):
    """Emergency, assignment and progress alert configuration.

    Environment Variables:
        EMERGENCY_RATE_LIMIT: slowapi limit for raising emergencies (default: 10/minute)
        EMAIL_AUDIT_ENABLED: Record every email attempt in emailLogs (default: True)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        limit = settings.alerts.EMERGENCY_RATE_LIMIT
        ```
    """

    EMERGENCY_RATE_LIMIT: str = Field(default="10/minute", alias="EMERGENCY_RATE_LIMIT")
    EMAIL_AUDIT_ENABLED: bool = Field(default=True, alias="EMAIL_AUDIT_ENABLED")
