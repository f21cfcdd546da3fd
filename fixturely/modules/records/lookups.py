import re
from typing import Any, Dict, List, Optional, Protocol


class RecordCollection(Protocol):
    """Protocol for the external document-store collections."""

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the first document matching the filter, or None."""
        ...

    async def find(self, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return every document matching the filter."""
        ...

    async def insert_one(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document and return it as stored."""
        ...


async def exists(collection: RecordCollection, **fields: Any) -> Optional[Dict[str, Any]]:
    """
    Look up a single record by exact field values.

    Args:
        collection: Document-store collection
        **fields: Exact-match filter

    Returns:
        The record if one matches, None otherwise
    """
    return await collection.find_one(dict(fields))


async def any_matching(collection: RecordCollection, fields: Dict[str, str]) -> List[Dict[str, Any]]:
    """
    Find records where any of the given fields contains its value.

    Matching is case-insensitive; values are matched literally.

    Args:
        collection: Document-store collection
        fields: Field name to search text

    Returns:
        Matching records (empty list if none, or if no fields were given)
    """
    conditions = [
        {field: {"$regex": re.escape(str(value)), "$options": "i"}}
        for field, value in fields.items()
    ]
    if not conditions:
        return []

    return await collection.find({"$or": conditions})


def strip_all_spaces(words: str) -> str:
    """Remove every whitespace character from a word or words."""
    return re.sub(r"\s", "", words)


class RecordLookup:
    """Existence checks against the users, fixtures and teams collections."""

    def __init__(
        self,
        users: RecordCollection,
        fixtures: RecordCollection,
        teams: RecordCollection,
    ):
        self.users = users
        self.fixtures = fixtures
        self.teams = teams

    async def user_exists(self, **fields: Any) -> Optional[Dict[str, Any]]:
        return await exists(self.users, **fields)

    async def fixture_exists(self, **fields: Any) -> Optional[Dict[str, Any]]:
        return await exists(self.fixtures, **fields)

    async def team_exists(self, **fields: Any) -> Optional[Dict[str, Any]]:
        return await exists(self.teams, **fields)
