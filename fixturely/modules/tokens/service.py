"""
Token service for Fixturely identity tokens.

Tokens are compact JWTs signed with a single process-wide secret. The secret
is injected once at startup; rotating it invalidates every token issued
before the rotation.
"""

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

import jwt

from .duration import Expiry, parse_expiry

logger = logging.getLogger(__name__)

# Claims added by the service on top of the caller's payload
REGISTERED_CLAIMS = ("iat", "exp")

# Only the signature and the presence of exp are checked by PyJWT. Other
# registered claim names in a caller's payload are carried, not validated.
DECODE_OPTIONS = {
    "require": ["exp"],
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidTokenError(TokenError):
    """Token is malformed or its signature does not match."""


class ExpiredTokenError(TokenError):
    """Token signature is valid but its expiry has passed."""


class TokenFailure(str, Enum):
    """Kind of token verification failure."""

    INVALID = "invalid"
    EXPIRED = "expired"


@dataclass
class TokenResult:
    """Standardized token check result."""
    ok: bool
    payload: Optional[Dict[str, Any]] = None
    failure: Optional[TokenFailure] = None

    @property
    def message(self) -> Optional[str]:
        if self.failure is TokenFailure.EXPIRED:
            return "Token has expired"
        if self.failure is TokenFailure.INVALID:
            return "Invalid token"
        return None


class TokenService:
    """
    Issues and validates signed, time-limited identity tokens.

    The clock is injectable so expiry can be exercised without sleeping; it
    drives both the claims written by issue() and the expiry check in verify().
    """

    def __init__(
        self,
        secret_key: str,
        default_expires_in: Expiry = "30days",
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize token service.

        Args:
            secret_key: Process-wide signing secret
            default_expires_in: Lifetime applied when issue() gets none
            algorithm: HMAC algorithm used for signing
            clock: Returns the current time in epoch seconds
        """
        if not secret_key:
            raise ValueError("Token secret key must not be empty")

        self._secret_key = secret_key
        self.algorithm = algorithm
        self.default_expires_in = parse_expiry(default_expires_in)
        self._clock = clock

    def issue(self, payload: Mapping[str, Any], expires_in: Optional[Expiry] = None) -> str:
        """
        Sign a payload into a token.

        Args:
            payload: JSON-serializable claims identifying the subject
            expires_in: Token lifetime (defaults to the service lifetime)

        Returns:
            Compact signed token string
        """
        if not isinstance(payload, Mapping):
            raise ValueError("Token payload must be a mapping")
        if "exp" in payload:
            raise ValueError('Payload already has an "exp" property')

        lifetime = self.default_expires_in if expires_in is None else parse_expiry(expires_in)

        now = self._clock()
        claims = dict(payload)
        claims["iat"] = int(now)
        claims["exp"] = math.floor(now + lifetime.total_seconds())

        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Validate a token and return its payload.

        Args:
            token: Compact signed token string

        Returns:
            The payload that was passed to issue()

        Raises:
            ExpiredTokenError: If the expiry claim has passed
            InvalidTokenError: If the token is malformed or the signature does not match
        """
        if not token:
            raise InvalidTokenError("Token is empty")

        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self.algorithm], options=DECODE_OPTIONS)
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e)) from e

        # Expiry is judged against the service clock, the same one issue() uses
        expires_at = claims["exp"]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise InvalidTokenError("Expiration Time claim (exp) must be a number")
        if expires_at <= self._clock():
            raise ExpiredTokenError("Signature has expired")

        return {key: value for key, value in claims.items() if key not in REGISTERED_CLAIMS}

    def check(self, token: Optional[str]) -> TokenResult:
        """
        Validate a token without raising.

        Args:
            token: Token string, with or without a "Bearer " prefix

        Returns:
            TokenResult carrying either the payload or the failure kind
        """
        if token and token.startswith("Bearer "):
            token = token[7:]

        try:
            payload = self.verify(token)
        except ExpiredTokenError:
            logger.debug("Token expired")
            return TokenResult(ok=False, failure=TokenFailure.EXPIRED)
        except InvalidTokenError as e:
            logger.debug(f"Invalid token: {e}")
            return TokenResult(ok=False, failure=TokenFailure.INVALID)

        return TokenResult(ok=True, payload=payload)
