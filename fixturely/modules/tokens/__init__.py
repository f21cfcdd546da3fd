"""
Tokens Module - Black Box Interface

Purpose: Issue and validate signed, time-limited identity tokens
Interface: issue(), verify(), check()
Hidden: Token format, signing algorithm, lifetime parsing

Replaceable with any signed-token scheme that keeps the same failure kinds.
"""

from .duration import parse_expiry
from .service import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenError,
    TokenFailure,
    TokenResult,
    TokenService,
)

__all__ = [
    "ExpiredTokenError",
    "InvalidTokenError",
    "TokenError",
    "TokenFailure",
    "TokenResult",
    "TokenService",
    "parse_expiry",
]
