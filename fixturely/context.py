"""
Application context following Black Box Design principles.

The context is the composition root:
- Holds the process-wide resources (signing secret, Redis client)
- Constructs every module with its dependencies injected
- Is replaced wholesale in tests
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import redis.asyncio as redis

from .config.provider import ConfigProvider, RuntimeConfig
from .modules.cache import CacheModule
from .modules.credentials import CredentialCodec
from .modules.records import MemoryCollection, RecordLookup
from .modules.sessions import SessionStore, create_session_store
from .modules.tokens import TokenService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Process-scoped dependencies shared by every request."""
    runtime: RuntimeConfig
    redis_client: Any
    credentials: CredentialCodec
    tokens: TokenService
    cache: CacheModule
    sessions: SessionStore
    records: RecordLookup

    async def close(self) -> None:
        """Release the cache connection."""
        if self.redis_client is not None:
            await self.redis_client.aclose()


def create_redis_client(redis_url: str) -> redis.Redis:
    """Create the shared Redis client from a connection URL."""
    return redis.from_url(redis_url, encoding="utf-8", decode_responses=True)


class ContextFactory:
    """Builds the application context from configuration."""

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        redis_client: Optional[Any] = None,
        records: Optional[RecordLookup] = None,
    ) -> AppContext:
        """
        Build the complete application context.

        Args:
            config_provider: Configuration provider
            redis_client: Optional pre-built Redis client
            records: Optional document-store lookups (in-process collections otherwise)

        Returns:
            AppContext with every module wired
        """
        runtime = config_provider.get_runtime_config()
        token_config = config_provider.get_token_config()
        cache_config = config_provider.get_cache_config()

        if redis_client is None:
            redis_client = create_redis_client(cache_config.redis_url)

        if records is None:
            logger.warning("No document store injected; using in-process collections")
            records = RecordLookup(
                users=MemoryCollection("users"),
                fixtures=MemoryCollection("fixtures"),
                teams=MemoryCollection("teams"),
            )

        return AppContext(
            runtime=runtime,
            redis_client=redis_client,
            credentials=CredentialCodec(default_cost=runtime.password_hash_cost),
            tokens=TokenService(
                token_config.secret_key,
                default_expires_in=token_config.expires_in,
                algorithm=token_config.algorithm,
            ),
            cache=CacheModule(redis_client, default_ttl=cache_config.default_ttl),
            sessions=create_session_store(runtime.mode),
            records=records,
        )

    @staticmethod
    def build_for_testing(
        redis_client: Any,
        records: RecordLookup,
        secret_key: str = "test-secret-key-with-at-least-32-bytes",
        environment: str = "test",
        password_hash_cost: int = 4,
    ) -> AppContext:
        """
        Build a context for testing with injected fakes.

        Args:
            redis_client: Fake or mock Redis client
            records: Document-store lookups over test collections
            secret_key: Token signing secret
            environment: Runtime environment name
            password_hash_cost: bcrypt rounds (minimum keeps tests fast)

        Returns:
            AppContext for testing
        """
        runtime = RuntimeConfig(
            environment=environment,
            host="127.0.0.1",
            port=5000,
            log_level="DEBUG",
            session_secret=secret_key,
            password_hash_cost=password_hash_cost,
        )
        return AppContext(
            runtime=runtime,
            redis_client=redis_client,
            credentials=CredentialCodec(default_cost=password_hash_cost),
            tokens=TokenService(secret_key),
            cache=CacheModule(redis_client),
            sessions=create_session_store(runtime.mode),
            records=records,
        )
