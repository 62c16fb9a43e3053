"""CareBridge configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Integration settings
from infrastructure.configuration.integrations import (
    EmailSettings,
    FirestoreSettings,
)

# Feature settings
from infrastructure.configuration.features import AlertsFeatureSettings

# Infrastructure settings
from infrastructure.configuration.infrastructure import (
    NotificationSettings,
    RetrySettings,
    ServerSettings,
)


class Settings(BaseSettings):
    """CareBridge configuration settings - main aggregator.

    Aggregates all domain-specific settings into a single configuration object.
    Settings are organized by concern:

    - **Integrations**: External services (email transports, Firestore)
    - **Features**: Feature module configurations (alerts)
    - **Infrastructure**: Core system configurations (retry, notifications, server)

    Environment Variables:
        PREFIX: Environment prefix for multi-tenant deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        GIT_SHA: Git commit SHA for deployment tracking
        APP_NAME: Service name bound to every log line

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        provider = settings.email.EMAIL_PROVIDER
        if settings.firestore.uses_firestore:
            # Initialize firebase_admin...

        attempts = settings.retry.max_attempts
        ```
    """

    # Application-level settings
    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"
    GIT_SHA: str = "Unknown"
    APP_NAME: str = "Rehabilitation Center System"

    # Integration settings
    email: EmailSettings
    firestore: FirestoreSettings

    # Feature settings
    alerts: AlertsFeatureSettings

    # Infrastructure settings
    server: ServerSettings
    retry: RetrySettings
    notifications: NotificationSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production.

        Returns:
            True if PREFIX is empty (production), False otherwise.
        """
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            # Integrations
            "email": EmailSettings,
            "firestore": FirestoreSettings,
            # Features
            "alerts": AlertsFeatureSettings,
            # Infrastructure
            "server": ServerSettings,
            "retry": RetrySettings,
            "notifications": NotificationSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )
