"""
Records Module - Black Box Interface

Purpose: Record-existence lookups against the document store
Interface: exists(), any_matching(), RecordLookup
Hidden: Query construction for the document store

The document store itself is an external collaborator; any collection
honoring the RecordCollection protocol can be injected.
"""

from .lookups import RecordCollection, RecordLookup, any_matching, exists, strip_all_spaces
from .memory import MemoryCollection

__all__ = [
    "MemoryCollection",
    "RecordCollection",
    "RecordLookup",
    "any_matching",
    "exists",
    "strip_all_spaces",
]
