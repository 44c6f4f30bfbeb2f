from __future__ import annotations

from enum import Enum


class EntityKind(str, Enum):
    AUTHOR = "AUTHOR"
    PUBLISHER = "PUBLISHER"
    CATEGORY = "CATEGORY"
    # Books and newspapers draw from this single sequence
    PUBLICATION = "PUBLICATION"


class IdAllocator:
    """
    Per-kind monotonic integer ids, starting at 1.

    Owned by a CatalogService instance; seeded with fast_forward() after the
    collections are loaded so new entities never reuse a persisted id.
    """

    def __init__(self):
        self._next = {kind: 1 for kind in EntityKind}

    def next(self, kind: EntityKind) -> int:
        value = self._next[kind]
        self._next[kind] = value + 1
        return value

    def peek(self, kind: EntityKind) -> int:
        return self._next[kind]

    def fast_forward(self, kind: EntityKind, next_id: int) -> None:
        """Make the next allocation at least next_id. Never rewinds."""
        if next_id > self._next[kind]:
            self._next[kind] = next_id
