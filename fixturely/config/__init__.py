"""Configuration provider for Fixturely."""

from .provider import (
    CacheConfig,
    ConfigProvider,
    EnvConfigProvider,
    RuntimeConfig,
    RuntimeMode,
    TokenConfig,
)

__all__ = [
    "CacheConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "RuntimeConfig",
    "RuntimeMode",
    "TokenConfig",
]
