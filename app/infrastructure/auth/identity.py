"""Infrastructure auth module - signed-in identity and profiles."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from infrastructure.persistence import DocumentStore

USERS_COLLECTION = "users"


@dataclass
class Identity:
    """The caller behind a verified token."""

    uid: str
    email: Optional[str] = None
    role: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


class AuthProvider(ABC):
    """Verifies identity tokens and reads/updates user profiles."""

    @abstractmethod
    async def current_identity(self, token: str) -> Identity:
        """Verify ``token`` and return the identity it carries.

        Raises:
            AuthenticationError: The token is missing, expired or invalid.
        """
        pass

    @abstractmethod
    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def update_profile(self, uid: str, data: Dict[str, Any]) -> None:
        pass


class ProfileStoreMixin:
    """Profile reads and writes against the ``users`` collection."""

    documents: DocumentStore

    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        return await self.documents.read(USERS_COLLECTION, uid)

    async def update_profile(self, uid: str, data: Dict[str, Any]) -> None:
        await self.documents.update(USERS_COLLECTION, uid, data)
