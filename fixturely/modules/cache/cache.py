import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class CacheBackendError(Exception):
    """The cache backend could not be reached or failed the request."""


@dataclass
class CacheLookup:
    """Result of a cache read. A cached JSON null is a hit with value None."""
    hit: bool
    value: Any = None


class CacheModule:
    def __init__(self, redis_client, default_ttl: int = 3600):
        """
        Initialize cache module.

        Args:
            redis_client: Async Redis client (decode_responses=True)
            default_ttl: Default entry TTL in seconds (1 hour)
        """
        self.redis = redis_client
        self.default_ttl = default_ttl

    async def store(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store a value, replacing any existing entry and resetting its TTL.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Time-to-live in seconds (defaults to the module TTL)

        Returns:
            True once the backend acknowledged the write

        Raises:
            CacheBackendError: If the backend is unavailable
        """
        ttl = self.default_ttl if ttl is None else ttl
        if not isinstance(ttl, int) or isinstance(ttl, bool) or ttl <= 0:
            raise ValueError(f"Cache TTL must be a positive integer, got {ttl!r}")

        data = json.dumps(value)

        try:
            await self.redis.setex(key, ttl, data)
        except RedisError as e:
            logger.error(f"Cache store failed for {key}: {e}")
            raise CacheBackendError(f"Cache store failed for {key}: {e}") from e

        return True

    async def lookup(self, key: str) -> CacheLookup:
        """
        Read a value and report whether it was present.

        Args:
            key: Cache key

        Returns:
            CacheLookup with hit flag and decoded value

        Raises:
            CacheBackendError: If the backend is unavailable
        """
        try:
            data = await self.redis.get(key)
        except RedisError as e:
            logger.error(f"Cache fetch failed for {key}: {e}")
            raise CacheBackendError(f"Cache fetch failed for {key}: {e}") from e

        if data is None:
            return CacheLookup(hit=False)

        try:
            return CacheLookup(hit=True, value=json.loads(data))
        except ValueError:
            # Not written by this module; drop it so the next store repairs it
            logger.warning(f"Discarding undecodable cache entry {key}")
            await self.evict(key)
            return CacheLookup(hit=False)

    async def fetch(self, key: str) -> Optional[Any]:
        """
        Get a cached value.

        Args:
            key: Cache key

        Returns:
            Decoded value, or None on a cache miss

        Raises:
            CacheBackendError: If the backend is unavailable
        """
        result = await self.lookup(key)
        return result.value if result.hit else None

    async def evict(self, key: str) -> bool:
        """
        Remove a value. Removing an absent key is not an error.

        Args:
            key: Cache key

        Returns:
            True if an entry was removed

        Raises:
            CacheBackendError: If the backend is unavailable
        """
        try:
            removed = await self.redis.delete(key)
        except RedisError as e:
            logger.error(f"Cache evict failed for {key}: {e}")
            raise CacheBackendError(f"Cache evict failed for {key}: {e}") from e

        return bool(removed)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Optional[Any]:
        """
        Read through the cache, falling back to the loader on a miss.

        Args:
            key: Cache key
            loader: Coroutine function fetching the value from the primary store
            ttl: Time-to-live for a freshly loaded value

        Returns:
            Cached or freshly loaded value; None if the loader found nothing

        Notes:
            - None results are not cached, so absent records are re-checked
            - Backend failures propagate as CacheBackendError
        """
        result = await self.lookup(key)
        if result.hit:
            logger.debug(f"Cache hit: {key}")
            return result.value

        logger.debug(f"Cache miss: {key}")
        value = await loader()

        if value is not None:
            await self.store(key, value, ttl)

        return value
