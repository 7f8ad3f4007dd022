"""Hash index from key to recency-list handle."""

from __future__ import annotations

from collections.abc import Hashable, KeysView

from lruhash.errors import LRUHashStructureError


class Index:
    """Maps each live key to the integer handle of its entry.

    The index never owns entries; the recency list does. Handles stay valid
    until the entry is unlinked, at which point the caller must remove the key
    here as well.
    """

    __slots__ = ("_handles",)

    def __init__(self) -> None:
        self._handles: dict[Hashable, int] = {}

    def lookup(self, key: Hashable) -> int | None:
        return self._handles.get(key)

    def insert(self, key: Hashable, handle: int) -> None:
        """Insert a brand-new key (callers take the update path for existing keys)."""

        if key in self._handles:
            raise LRUHashStructureError(f"Key already indexed: {key!r}")
        self._handles[key] = handle

    def remove(self, key: Hashable) -> int | None:
        """Remove `key` and return its handle, or None if it was not indexed."""

        return self._handles.pop(key, None)

    def size(self) -> int:
        return len(self._handles)

    def keys(self) -> KeysView[Hashable]:
        return self._handles.keys()

    def clear(self) -> None:
        self._handles.clear()

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, key: object) -> bool:
        return key in self._handles
