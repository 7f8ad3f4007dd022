"""Recency ordering for cache entries.

Entries live in an arena (a list of slots) and are addressed by stable integer
handles, so the index can refer to an entry's position without holding a
reference into the linked structure. Freed slots are reused by later inserts.

Links run from head (least recently used) to tail (most recently used).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from lruhash.errors import LRUHashStructureError

K = TypeVar("K")
V = TypeVar("V")


@dataclass(slots=True)
class Entry(Generic[K, V]):
    key: K
    value: V
    prev: int | None = None
    next: int | None = None


class RecencyList(Generic[K, V]):
    """Doubly linked LRU -> MRU ordering with O(1) append, promote, unlink and pop.

    Iterators are lazy and are invalidated by any mutation of the list.
    """

    __slots__ = ("_slots", "_free", "_head", "_tail", "_length")

    def __init__(self) -> None:
        self._slots: list[Entry[K, V] | None] = []
        self._free: list[int] = []
        self._head: int | None = None
        self._tail: int | None = None
        self._length = 0

    @property
    def head(self) -> int | None:
        return self._head

    @property
    def tail(self) -> int | None:
        return self._tail

    def __len__(self) -> int:
        return self._length

    def entry(self, handle: int) -> Entry[K, V]:
        """Return the live entry behind `handle`."""

        try:
            entry = self._slots[handle]
        except IndexError:
            entry = None
        if entry is None:
            raise LRUHashStructureError(f"Stale or unknown handle: {handle}")
        return entry

    def append_tail(self, entry: Entry[K, V]) -> int:
        """Store a brand-new entry as most recently used and return its handle."""

        if self._free:
            handle = self._free.pop()
            self._slots[handle] = entry
        else:
            handle = len(self._slots)
            self._slots.append(entry)
        self._link_tail(handle, entry)
        self._length += 1
        return handle

    def move_to_tail(self, handle: int) -> None:
        if handle == self._tail:
            return
        entry = self.entry(handle)
        self._detach(entry)
        self._link_tail(handle, entry)

    def unlink(self, handle: int) -> Entry[K, V]:
        """Remove the entry at any position and release its slot."""

        entry = self.entry(handle)
        self._detach(entry)
        self._slots[handle] = None
        self._free.append(handle)
        self._length -= 1
        return entry

    def pop_head(self) -> Entry[K, V] | None:
        if self._head is None:
            return None
        return self.unlink(self._head)

    def clear(self) -> None:
        self._slots.clear()
        self._free.clear()
        self._head = self._tail = None
        self._length = 0

    def iter_lru(self) -> Iterator[Entry[K, V]]:
        handle = self._head
        while handle is not None:
            entry = self.entry(handle)
            yield entry
            handle = entry.next

    def iter_mru(self) -> Iterator[Entry[K, V]]:
        handle = self._tail
        while handle is not None:
            entry = self.entry(handle)
            yield entry
            handle = entry.prev

    def _link_tail(self, handle: int, entry: Entry[K, V]) -> None:
        entry.prev = self._tail
        entry.next = None
        if self._tail is None:
            self._head = handle
        else:
            self.entry(self._tail).next = handle
        self._tail = handle

    def _detach(self, entry: Entry[K, V]) -> None:
        if entry.prev is None:
            self._head = entry.next
        else:
            self.entry(entry.prev).next = entry.next
        if entry.next is None:
            self._tail = entry.prev
        else:
            self.entry(entry.next).prev = entry.prev
        entry.prev = entry.next = None
