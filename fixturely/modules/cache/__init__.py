"""
Cache Module - Black Box Interface

Purpose: Cache-aside storage of JSON values with expiry
Interface: store(), fetch(), lookup(), evict(), get_or_load()
Hidden: Redis commands, serialization, backend error mapping

Callers work with plain values; a miss is None, an outage is CacheBackendError.
"""

from .cache import CacheBackendError, CacheLookup, CacheModule
from .keys import CacheKeys

__all__ = ["CacheBackendError", "CacheKeys", "CacheLookup", "CacheModule"]
