"""
Session stores for the request's authenticated user.

Which store a process uses is decided once, from the runtime mode:
- Test mode keeps the user on the request itself (nothing survives the request)
- Standard mode keeps the user in the signed cookie session
"""

import logging
from typing import Any, Dict, Optional, Protocol

from starlette.requests import Request

from ...config.provider import RuntimeMode

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user"


class SessionStore(Protocol):
    """Protocol for current-user storage."""

    def read(self, request: Request) -> Optional[Dict[str, Any]]:
        """Return the user attached to the request, or None."""
        ...

    def write(self, request: Request, user: Dict[str, Any]) -> None:
        """Attach a user to the request."""
        ...

    def clear(self, request: Request) -> None:
        """Detach any user from the request."""
        ...


class RequestStateSessionStore:
    """Keeps the user on request.state for the lifetime of one request."""

    mode = RuntimeMode.TEST

    def read(self, request: Request) -> Optional[Dict[str, Any]]:
        return getattr(request.state, SESSION_USER_KEY, None)

    def write(self, request: Request, user: Dict[str, Any]) -> None:
        setattr(request.state, SESSION_USER_KEY, user)

    def clear(self, request: Request) -> None:
        setattr(request.state, SESSION_USER_KEY, None)


class CookieSessionStore:
    """
    Keeps the user in the persistent session.

    Requires Starlette's SessionMiddleware; the user must be JSON-safe since
    the session is serialized into a signed cookie.
    """

    mode = RuntimeMode.STANDARD

    def read(self, request: Request) -> Optional[Dict[str, Any]]:
        return request.session.get(SESSION_USER_KEY)

    def write(self, request: Request, user: Dict[str, Any]) -> None:
        request.session[SESSION_USER_KEY] = user

    def clear(self, request: Request) -> None:
        request.session.pop(SESSION_USER_KEY, None)


def create_session_store(mode: RuntimeMode) -> SessionStore:
    """
    Build the session store for a runtime mode.

    Args:
        mode: Process runtime mode

    Returns:
        SessionStore implementation for that mode
    """
    if mode is RuntimeMode.TEST:
        logger.info("Using request-state session store (test mode)")
        return RequestStateSessionStore()

    logger.info("Using cookie session store")
    return CookieSessionStore()
