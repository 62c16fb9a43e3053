"""Integration settings __init__ - exports all integration settings."""

from infrastructure.configuration.integrations.email import EmailSettings
from infrastructure.configuration.integrations.firestore import FirestoreSettings

__all__ = [
    "EmailSettings",
    "FirestoreSettings",
]
