from __future__ import annotations

import logging
from typing import Any, Protocol

from fastapi import Depends, HTTPException, Request, status

logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    """Abstract identity provider interface.

    The sign-in and sign-up flows belong to the hosted identity provider;
    the CRM only needs to know who is signed in and how to sign them out.
    """

    def current_user(self) -> dict[str, Any] | None:
        """Return the signed-in user, or None."""
        ...

    async def logout(self) -> None:
        """End the current session."""
        ...


class SessionAuth(AuthProvider):
    """In-process session restored from the identity provider's callback."""

    def __init__(self) -> None:
        self._user: dict[str, Any] | None = None

    def current_user(self) -> dict[str, Any] | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def restore(self, user: dict[str, Any]) -> None:
        """Adopt the user handed over by the identity provider."""
        self._user = dict(user)
        logger.info("Session restored for user %s", user.get("emailAddress") or user.get("userId"))

    async def logout(self) -> None:
        if self._user is not None:
            logger.info("User logged out")
        self._user = None


def get_auth(request: Request) -> SessionAuth:
    return request.app.state.auth  # type: ignore[no-any-return]


async def require_user(
    auth: SessionAuth = Depends(get_auth),
) -> dict[str, Any] | None:
    """Reject requests without a signed-in user when auth is enforced."""
    from crmdesk.core.config import settings

    if not settings.auth_required:
        return None

    user = auth.current_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user
