"""Minimal identity dependency.

Stub implementation that reads the user id from a bearer token. There is no
token validation: the token *is* the user id. Each user id gets its own
isolated document collection.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Header, HTTPException, status

DEFAULT_USER_ID = "anonymous"


@dataclass(frozen=True)
class RequestContext:
    """Request context containing the caller's user identity.

    Used to select the caller's document collection in every operation.
    """

    user_id: str


async def get_current_context(
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    Either:
    - Parses "Bearer <user_id>"
    - Returns the default user if no header

    Args:
        authorization: Authorization header (e.g., "Bearer 5923775544")

    Returns:
        RequestContext with user_id

    Raises:
        HTTPException: If authorization is malformed
    """
    if not authorization:
        return RequestContext(user_id=DEFAULT_USER_ID)

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:].strip()  # Strip "Bearer "

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Empty bearer token (expected user id)",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return RequestContext(user_id=token)
