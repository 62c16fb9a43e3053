"""HTTP server infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """Server and application runtime configuration.

    Environment Variables:
        BACKEND_URL: Backend API base URL (default: http://127.0.0.1:8000)
        CORS_ORIGINS: Comma separated list of allowed origins
        AUTH_ENABLED: Require a Firebase ID token on API routes (default: True)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        origins = settings.server.cors_origins
        ```
    """

    BACKEND_URL: str = Field(default="http://127.0.0.1:8000", alias="BACKEND_URL")
    CORS_ORIGINS: str = Field(default="", alias="CORS_ORIGINS")
    AUTH_ENABLED: bool = Field(default=True, alias="AUTH_ENABLED")

    @property
    def cors_origins(self) -> List[str]:
        return [
            origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()
        ]
