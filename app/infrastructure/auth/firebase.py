"""Firebase Authentication provider.

The web client signs users in with Firebase Authentication and sends the
ID token as a bearer token; the role comes from the ``role`` custom claim.
"""

import asyncio
from typing import Any, Dict, Optional

import structlog
from firebase_admin import auth

from infrastructure.auth.identity import AuthProvider, Identity, ProfileStoreMixin
from infrastructure.exceptions import AuthenticationError
from infrastructure.persistence import DocumentStore
from infrastructure.resilience import RetryPolicy, retry_operation

logger = structlog.get_logger()


class FirebaseAuthProvider(ProfileStoreMixin, AuthProvider):
    """Verifies Firebase ID tokens with the Admin SDK.

    Verification runs through the retry wrapper; a rejected token is
    reported after the last attempt.
    """

    def __init__(
        self, documents: DocumentStore, retry_policy: Optional[RetryPolicy] = None
    ):
        self.documents = documents
        self.retry_policy = retry_policy or RetryPolicy()

    async def current_identity(self, token: str) -> Identity:
        if not token:
            raise AuthenticationError("Missing ID token")
        try:
            decoded: Dict[str, Any] = await retry_operation(
                lambda: asyncio.to_thread(auth.verify_id_token, token),
                policy=self.retry_policy,
                operation_name="verify_id_token",
            )
        except Exception as e:
            logger.warning("id_token_verification_failed", error=str(e))
            raise AuthenticationError("Invalid ID token") from e

        return Identity(
            uid=decoded["uid"],
            email=decoded.get("email"),
            role=decoded.get("role"),
            claims=decoded,
        )


class StaticAuthProvider(ProfileStoreMixin, AuthProvider):
    """Identities from a fixed token map, for local development and tests.

    With ``trust_tokens`` set, an unknown token is taken as the caller's uid.
    """

    def __init__(
        self,
        documents: DocumentStore,
        identities: Optional[Dict[str, Identity]] = None,
        trust_tokens: bool = False,
    ):
        self.documents = documents
        self.identities = identities or {}
        self.trust_tokens = trust_tokens

    async def current_identity(self, token: str) -> Identity:
        identity = self.identities.get(token)
        if identity is not None:
            return identity
        if self.trust_tokens and token:
            return Identity(uid=token)
        raise AuthenticationError("Unknown token")
