"""
In-process document collection.

Implements the subset of the document-store query language the lookups use:
exact field matches, "$or" and "$regex" with "$options". Backs development
runs and tests; deployments inject their own collections.
"""

import copy
import re
import uuid
from typing import Any, Dict, Iterable, List, Optional


def _matches_condition(actual: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and "$regex" in condition:
        if actual is None:
            return False
        flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
        return re.search(condition["$regex"], str(actual), flags) is not None
    return actual == condition


def matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    """Check whether a document satisfies a filter."""
    for field, condition in query.items():
        if field == "$or":
            if not any(matches(document, sub_query) for sub_query in condition):
                return False
        elif not _matches_condition(document.get(field), condition):
            return False
    return True


class MemoryCollection:
    """A named list of documents queried with document-store filters."""

    def __init__(self, name: str, documents: Optional[Iterable[Dict[str, Any]]] = None):
        self.name = name
        self._documents: List[Dict[str, Any]] = [copy.deepcopy(doc) for doc in documents or []]

    def __len__(self) -> int:
        return len(self._documents)

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for document in self._documents:
            if matches(document, query):
                return copy.deepcopy(document)
        return None

    async def find(self, query: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [copy.deepcopy(doc) for doc in self._documents if matches(doc, query)]

    async def insert_one(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document, assigning an "id" when it has none."""
        stored = copy.deepcopy(document)
        stored.setdefault("id", uuid.uuid4().hex)
        self._documents.append(stored)
        return copy.deepcopy(stored)
