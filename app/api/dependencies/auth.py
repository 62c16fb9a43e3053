"""Caller identity for API routes.

Routes that act on behalf of a user (listing, reading, acknowledging
notifications) take the uid from a verified bearer token, never from the
request body.
"""

from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.auth import Identity
from infrastructure.exceptions import AuthenticationError
from infrastructure.services import AuthProviderDep

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    auth: AuthProviderDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """Resolve the caller from the ``Authorization: Bearer`` header.

    Raises:
        HTTPException: 401 when the header is missing or the token is rejected.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=401,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await auth.current_identity(credentials.credentials)
    except AuthenticationError as e:
        logger.warning("api_authentication_failed", error=str(e))
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentIdentityDep = Annotated[Identity, Depends(get_current_identity)]
