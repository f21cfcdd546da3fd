"""
Sessions Module - Black Box Interface

Purpose: Read and write the authenticated user of the current request
Interface: read(), write(), clear(), create_session_store()
Hidden: Where the user lives (request state or cookie session)

Replaceable with any session backend honoring the SessionStore protocol.
"""

from .store import (
    CookieSessionStore,
    RequestStateSessionStore,
    SessionStore,
    create_session_store,
)

__all__ = [
    "CookieSessionStore",
    "RequestStateSessionStore",
    "SessionStore",
    "create_session_store",
]
