"""Document store and Firebase integration settings."""

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class FirestoreSettings(IntegrationSettings):
    """Document store backend configuration.

    Environment Variables:
        DOCUMENT_STORE_BACKEND: 'memory' (development, tests) or 'firestore'
        FIREBASE_CREDENTIALS: Path to the service account JSON file
        FIREBASE_PROJECT_ID: Optional explicit project id
    """

    DOCUMENT_STORE_BACKEND: str = Field(default="memory", alias="DOCUMENT_STORE_BACKEND")
    FIREBASE_CREDENTIALS: str = Field(
        default="firebase_key.json", alias="FIREBASE_CREDENTIALS"
    )
    FIREBASE_PROJECT_ID: str | None = Field(default=None, alias="FIREBASE_PROJECT_ID")

    @property
    def uses_firestore(self) -> bool:
        return self.DOCUMENT_STORE_BACKEND.lower() == "firestore"
