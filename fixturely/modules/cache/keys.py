"""
Cache key management.

Naming convention: {entity}:{id}
"""


class CacheKeys:
    """Centralized cache key definitions."""

    PREFIX_USER = "user"
    PREFIX_FIXTURE = "fixture"
    PREFIX_TEAM = "team"

    # TTLs (in seconds)
    TTL_SHORT = 60 * 5
    TTL_DEFAULT = 60 * 60
    TTL_DAY = 60 * 60 * 24

    @staticmethod
    def user(user_id) -> str:
        """Cache key for a user record."""
        return f"{CacheKeys.PREFIX_USER}:{user_id}"

    @staticmethod
    def fixture(fixture_id) -> str:
        """Cache key for a fixture record."""
        return f"{CacheKeys.PREFIX_FIXTURE}:{fixture_id}"

    @staticmethod
    def team(team_id) -> str:
        """Cache key for a team record."""
        return f"{CacheKeys.PREFIX_TEAM}:{team_id}"
