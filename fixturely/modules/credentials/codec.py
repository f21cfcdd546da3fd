"""
Password hashing for Fixturely accounts.

Plaintext passwords are only ever accepted as input. What gets stored is a
bcrypt hash carrying its own salt and cost, so verification never needs
anything but the candidate password and the stored string.
"""

import asyncio
import logging
from typing import Optional

import bcrypt

logger = logging.getLogger(__name__)

MIN_COST = 4
MAX_COST = 31

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


class CredentialCodec:
    """
    Hashes and verifies passwords with bcrypt.

    Hashing is CPU bound and is moved off the event loop; verification is a
    synchronous constant-time comparison delegated to bcrypt.
    """

    def __init__(self, default_cost: int = 10):
        """
        Initialize credential codec.

        Args:
            default_cost: bcrypt log-rounds used when hash() is called without a cost
        """
        self._check_cost(default_cost)
        self.default_cost = default_cost

    @staticmethod
    def _check_cost(cost: int) -> None:
        if not MIN_COST <= cost <= MAX_COST:
            raise ValueError(f"Hash cost must be between {MIN_COST} and {MAX_COST}, got {cost}")

    async def hash(self, password: str, cost: Optional[int] = None) -> str:
        """
        Hash a password.

        Args:
            password: Plaintext password
            cost: Work factor (bcrypt log-rounds), defaults to the codec's cost

        Returns:
            bcrypt hash string (salt and cost embedded)
        """
        rounds = self.default_cost if cost is None else cost
        self._check_cost(rounds)

        hashed = await asyncio.to_thread(
            bcrypt.hashpw, _encode(password), bcrypt.gensalt(rounds=rounds)
        )
        return hashed.decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        Args:
            password: Candidate plaintext password
            hashed: Stored bcrypt hash

        Returns:
            True if the password matches, False otherwise
        """
        if not password or not hashed:
            return False

        try:
            return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
        except ValueError:
            # Not a bcrypt hash
            logger.warning("Stored password hash is malformed")
            return False

    def needs_rehash(self, hashed: str) -> bool:
        """Whether a stored hash was produced with a different cost."""
        try:
            cost = int(hashed.split("$")[2])
        except (IndexError, ValueError):
            return True
        return cost != self.default_cost
