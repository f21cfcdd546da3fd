"""
Shared pytest fixtures for Fixturely tests.

This module provides common fixtures including:
- Redis mocks for cache tests (call-shape and TTL-aware in-memory variants)
- In-memory document collections seeded with fixtures and teams
- FastAPI test client built around a test application context
"""

from typing import Dict, Optional
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from fixturely.context import ContextFactory
from fixturely.main import create_app
from fixturely.modules.records import MemoryCollection, RecordLookup

TEST_SECRET = "test-secret-key-with-at-least-32-bytes"


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================


class ExpiringRedis:
    """
    In-memory Redis stand-in that honors TTLs against a manual clock.

    Usage:
        async def test_expiry(expiring_redis):
            await expiring_redis.setex("k", 1, "v")
            expiring_redis.advance(1.5)
            assert await expiring_redis.get("k") is None

    Set ``available = False`` to make every command fail like a lost connection.
    """

    def __init__(self):
        self.now = 0.0
        self.available = True
        self._storage: Dict[str, str] = {}
        self._expires_at: Dict[str, float] = {}

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self.now += seconds

    def ttl_of(self, key: str) -> Optional[float]:
        """Remaining lifetime of a key, for assertions."""
        self._purge(key)
        if key not in self._expires_at:
            return None
        return self._expires_at[key] - self.now

    def _check_connection(self) -> None:
        if not self.available:
            raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    def _purge(self, key: str) -> None:
        expires_at = self._expires_at.get(key)
        if expires_at is not None and expires_at <= self.now:
            self._storage.pop(key, None)
            self._expires_at.pop(key, None)

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self._check_connection()
        self._storage[key] = value
        self._expires_at[key] = self.now + ttl
        return True

    async def set(self, key: str, value: str) -> bool:
        self._check_connection()
        self._storage[key] = value
        self._expires_at.pop(key, None)
        return True

    async def get(self, key: str) -> Optional[str]:
        self._check_connection()
        self._purge(key)
        return self._storage.get(key)

    async def delete(self, *keys: str) -> int:
        self._check_connection()
        count = 0
        for key in keys:
            self._purge(key)
            if key in self._storage:
                del self._storage[key]
                self._expires_at.pop(key, None)
                count += 1
        return count

    async def ping(self) -> bool:
        self._check_connection()
        return True

    async def aclose(self) -> None:
        pass


@pytest.fixture
def mock_redis():
    """Create a mock Redis client for async operations."""
    redis = AsyncMock()
    redis.setex = AsyncMock(return_value=True)
    redis.get = AsyncMock(return_value=None)
    redis.delete = AsyncMock(return_value=1)
    redis.ping = AsyncMock(return_value=True)
    return redis


@pytest.fixture
def expiring_redis():
    """Redis stand-in with storage and TTL behaviour."""
    return ExpiringRedis()


# =============================================================================
# Document Store
# =============================================================================

FIXTURES = [
    {
        "id": "fx-1",
        "home_team": "Arsenal",
        "away_team": "Chelsea",
        "kickoff": "2024-08-17T15:00:00Z",
        "venue": "Emirates Stadium",
    },
    {
        "id": "fx-2",
        "home_team": "Manchester United",
        "away_team": "Arsenal",
        "kickoff": "2024-08-24T17:30:00Z",
        "venue": "Old Trafford",
    },
]

TEAMS = [
    {"id": "tm-1", "name": "Arsenal", "short_name": "ARS", "stadium": "Emirates Stadium"},
    {"id": "tm-2", "name": "Chelsea", "short_name": "CHE", "stadium": "Stamford Bridge"},
    {"id": "tm-3", "name": "Manchester United", "short_name": "MUN", "stadium": "Old Trafford"},
]


@pytest.fixture
def records():
    """Record lookups over seeded in-memory collections."""
    return RecordLookup(
        users=MemoryCollection("users"),
        fixtures=MemoryCollection("fixtures", FIXTURES),
        teams=MemoryCollection("teams", TEAMS),
    )


# =============================================================================
# Application
# =============================================================================


@pytest.fixture
def app_context(expiring_redis, records):
    """Application context in test mode."""
    return ContextFactory.build_for_testing(expiring_redis, records, secret_key=TEST_SECRET)


@pytest.fixture
def client(app_context):
    """Test client for an application built around the test context."""
    return TestClient(create_app(app_context))


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
