"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol

from dotenv import load_dotenv


class RuntimeMode(str, Enum):
    """Process-wide runtime mode, selected once at startup."""

    TEST = "test"
    STANDARD = "standard"


@dataclass
class TokenConfig:
    """Token signing configuration."""
    secret_key: str
    expires_in: str
    algorithm: str = "HS256"


@dataclass
class CacheConfig:
    """Cache backend configuration."""
    redis_url: str
    default_ttl: int


@dataclass
class RuntimeConfig:
    """Runtime and API configuration."""
    environment: str
    host: str
    port: int
    log_level: str
    session_secret: str
    password_hash_cost: int
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def mode(self) -> RuntimeMode:
        """Test mode keeps the session user on the request itself."""
        if self.environment == "test":
            return RuntimeMode.TEST
        return RuntimeMode.STANDARD

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_token_config(self) -> TokenConfig:
        """Get token signing configuration."""
        ...

    def get_cache_config(self) -> CacheConfig:
        """Get cache backend configuration."""
        ...

    def get_runtime_config(self) -> RuntimeConfig:
        """Get runtime configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, env_file: Optional[str] = None):
        # Values already present in the environment take precedence over .env
        load_dotenv(env_file)

    def _secret_key(self) -> str:
        secret_key = os.getenv("SECRET_KEY")
        if not secret_key:
            raise ValueError(
                "SECRET_KEY environment variable is required. "
                "It signs every issued token; rotating it invalidates existing tokens."
            )
        return secret_key

    def get_token_config(self) -> TokenConfig:
        """Get token configuration from environment variables."""
        return TokenConfig(
            secret_key=self._secret_key(),
            expires_in=os.getenv("TOKEN_EXPIRES_IN", "30days"),
            algorithm=os.getenv("TOKEN_ALGORITHM", "HS256"),
        )

    def get_cache_config(self) -> CacheConfig:
        """Get cache configuration from environment variables."""
        return CacheConfig(
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            default_ttl=int(os.getenv("CACHE_TTL", "3600")),
        )

    def get_runtime_config(self) -> RuntimeConfig:
        """Get runtime configuration from environment variables."""
        environment = os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development"

        return RuntimeConfig(
            environment=environment.lower(),
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            session_secret=os.getenv("SESSION_SECRET") or self._secret_key(),
            password_hash_cost=int(os.getenv("PASSWORD_HASH_COST", "10")),
            cors_origins=[origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")],
        )
