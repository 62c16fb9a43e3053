"""Infrastructure auth module - identity verification and user profiles.

Exports:
    Identity: Verified caller
    AuthProvider: Verification and profile interface
    FirebaseAuthProvider: Firebase ID token verification
    StaticAuthProvider: Fixed token map for local development and tests
"""

from infrastructure.auth.identity import AuthProvider, Identity
from infrastructure.auth.firebase import FirebaseAuthProvider, StaticAuthProvider

__all__ = [
    "AuthProvider",
    "FirebaseAuthProvider",
    "Identity",
    "StaticAuthProvider",
]
