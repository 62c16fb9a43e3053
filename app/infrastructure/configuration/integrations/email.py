"""Transactional email integration settings."""

from pydantic import Field, field_validator

from infrastructure.configuration.base import IntegrationSettings

EMAIL_PROVIDERS = ("resend", "relay", "console")

# Older deployments configured the local relay under its Node.js name.
EMAIL_PROVIDER_ALIASES = {"nodemailer": "relay"}


class EmailSettings(IntegrationSettings):
    """Email transport configuration.

    Exactly one transport is active at a time. Unknown provider names fall
    back to the console transport so a misconfiguration never blocks alerts.

    Environment Variables:
        EMAIL_PROVIDER: 'resend', 'relay' (alias 'nodemailer') or 'console'
        RESEND_API_KEY: API key for the Resend HTTP API
        RESEND_API_URL: Resend endpoint (default: https://api.resend.com/emails)
        EMAIL_FROM_ADDRESS: Sender address
        EMAIL_FROM_NAME: Sender display name
        EMAIL_RELAY_URL: Local relay endpoint (default: http://localhost:3001/api/send-email)
        EMAIL_TIMEOUT_SECONDS: HTTP timeout for the remote transports

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        provider = settings.email.EMAIL_PROVIDER
        ```
    """

    EMAIL_PROVIDER: str = Field(default="console", alias="EMAIL_PROVIDER")
    RESEND_API_KEY: str | None = Field(default=None, alias="RESEND_API_KEY")
    RESEND_API_URL: str = Field(
        default="https://api.resend.com/emails", alias="RESEND_API_URL"
    )
    EMAIL_FROM_ADDRESS: str = Field(
        default="noreply@rehab-center.example", alias="EMAIL_FROM_ADDRESS"
    )
    EMAIL_FROM_NAME: str = Field(
        default="Rehabilitation Center System", alias="EMAIL_FROM_NAME"
    )
    EMAIL_RELAY_URL: str = Field(
        default="http://localhost:3001/api/send-email", alias="EMAIL_RELAY_URL"
    )
    EMAIL_TIMEOUT_SECONDS: float = Field(default=10.0, alias="EMAIL_TIMEOUT_SECONDS")

    @field_validator("EMAIL_PROVIDER", mode="before")
    @classmethod
    def normalize_provider(cls, v: object) -> str:
        """Lower-case the provider name and resolve legacy aliases."""
        name = str(v or "console").strip().lower()
        name = EMAIL_PROVIDER_ALIASES.get(name, name)
        if name not in EMAIL_PROVIDERS:
            return "console"
        return name

    @property
    def sender(self) -> str:
        """Formatted From header value."""
        return f"{self.EMAIL_FROM_NAME} <{self.EMAIL_FROM_ADDRESS}>"
