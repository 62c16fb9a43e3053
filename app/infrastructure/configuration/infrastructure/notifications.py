"""In-app notification infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class NotificationSettings(InfrastructureSettings):
    """Notification store, dispatcher and expiry job configuration.

    Environment Variables:
        NOTIFICATION_EXPIRY_SWEEP_MINUTES: Interval of the expiry sweep job (default: 60)
        NOTIFICATION_SCHEDULER_ENABLED: Start the expiry job with the server (default: True)
        NOTIFICATION_PROMINENT_DURATION_MS: Display time for high priority (default: 8000)
        NOTIFICATION_CONFIRMATION_DURATION_MS: Display time for other priorities (default: 5000)
        NOTIFICATION_REMINDER_LEAD_MINUTES: Session reminder lead time (default: 10)
    """

    expiry_sweep_minutes: int = Field(
        default=60,
        alias="NOTIFICATION_EXPIRY_SWEEP_MINUTES",
        ge=1,
    )
    scheduler_enabled: bool = Field(
        default=True,
        alias="NOTIFICATION_SCHEDULER_ENABLED",
    )
    prominent_duration_ms: int = Field(
        default=8000,
        alias="NOTIFICATION_PROMINENT_DURATION_MS",
    )
    confirmation_duration_ms: int = Field(
        default=5000,
        alias="NOTIFICATION_CONFIRMATION_DURATION_MS",
    )
    reminder_lead_minutes: int = Field(
        default=10,
        alias="NOTIFICATION_REMINDER_LEAD_MINUTES",
    )
