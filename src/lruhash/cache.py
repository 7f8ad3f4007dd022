"""A dict-like mapping bounded by entry count with least-recently-used eviction.

`LRUHash` pairs a hash `Index` (key -> handle) with a `RecencyList` (LRU -> MRU).
Reads through `get`/`[]` and every write promote the touched entry to the MRU
end; `fetch`, membership tests and iteration only observe.

The container is single-threaded. Iterators are lazy and must not be
interleaved with mutations; wrap the cache in `LockedLRUHash` when several
threads share it.
"""

from __future__ import annotations

import logging
from collections.abc import (
    Callable,
    Hashable,
    ItemsView,
    Iterable,
    Iterator,
    KeysView,
    Mapping,
    MutableMapping,
    ValuesView,
)
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from lruhash.errors import LRUHashCapacityError, LRUHashStructureError
from lruhash.index import Index
from lruhash.recency import Entry, RecencyList

if TYPE_CHECKING:  # pragma: no cover
    from lruhash.config import LRUHashConfig

logger = logging.getLogger("lruhash.cache")

DEFAULT_CAPACITY = 256

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING: Any = object()


def validate_capacity(value: object) -> int:
    """Return `value` if it is a usable capacity (an int >= 0)."""

    if not isinstance(value, int) or isinstance(value, bool):
        raise LRUHashCapacityError(
            f"Capacity must be an integer, got {type(value).__name__}."
        )
    if value < 0:
        raise LRUHashCapacityError(f"Capacity must be >= 0, got {value}.")
    return value


class _KeysView(KeysView):
    __slots__ = ()

    def __reversed__(self) -> Iterator[Any]:
        return reversed(self._mapping)


class _ValuesView(ValuesView):
    __slots__ = ()

    def __iter__(self) -> Iterator[Any]:
        for _key, value in self._mapping.each_in_lru_order():
            yield value

    def __reversed__(self) -> Iterator[Any]:
        for _key, value in self._mapping.each_in_mru_order():
            yield value

    def __contains__(self, value: object) -> bool:
        return any(v is value or v == value for v in self)


class _ItemsView(ItemsView):
    __slots__ = ()

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return self._mapping.each_in_lru_order()

    def __reversed__(self) -> Iterator[tuple[Any, Any]]:
        return self._mapping.each_in_mru_order()

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        key, value = item
        entry = self._mapping._peek(key)
        return entry is not None and (entry.value is value or entry.value == value)


class LRUHash(MutableMapping, Generic[K, V]):
    """A mapping holding at most `capacity` entries.

    Inserting a new key into a full cache first evicts the least recently used
    entry. Capacity 0 is allowed and keeps the cache permanently empty.
    Negative capacities raise `LRUHashCapacityError`.

    `entries` (a mapping or an iterable of pairs) pre-seeds the cache in order,
    subject to the same capacity bound.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        entries: Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
    ) -> None:
        self._capacity = validate_capacity(capacity)
        self._index = Index()
        self._recency: RecencyList[K, V] = RecencyList()
        if entries is not None:
            self.update(entries)

    @classmethod
    def from_config(
        cls,
        config: LRUHashConfig,
        entries: Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
    ) -> LRUHash[K, V]:
        return cls(config.cache.capacity, entries)

    # -- capacity ---------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self.set_capacity(value)

    def set_capacity(self, capacity: int) -> None:
        """Change the bound, evicting from the LRU end until the cache fits."""

        new_capacity = validate_capacity(capacity)
        old_capacity = self._capacity
        self._capacity = new_capacity

        evicted = 0
        while len(self._recency) > new_capacity:
            self._evict_lru()
            evicted += 1

        logger.debug(
            "Capacity changed %d -> %d (evicted %d)", old_capacity, new_capacity, evicted
        )

    # -- reads ------------------------------------------------------------

    def get(self, key: K, default: V | None = None) -> V | None:
        """Return the value for `key` and mark it most recently used.

        A miss returns `default` and leaves the cache untouched.
        """

        handle = self._index.lookup(key)
        if handle is None:
            return default
        self._recency.move_to_tail(handle)
        return self._recency.entry(handle).value

    def __getitem__(self, key: K) -> V:
        handle = self._index.lookup(key)
        if handle is None:
            raise KeyError(key)
        self._recency.move_to_tail(handle)
        return self._recency.entry(handle).value

    def fetch(
        self,
        key: K,
        default: V | None = None,
        factory: Callable[[], V] | None = None,
    ) -> V | None:
        """Return the value for `key` without changing its recency.

        On a miss, return `factory()` when a factory is given, else `default`.
        Nothing is inserted either way.
        """

        entry = self._peek(key)
        if entry is not None:
            return entry.value
        if factory is not None:
            return factory()
        return default

    def __contains__(self, key: object) -> bool:
        return key in self._index

    # -- writes -----------------------------------------------------------

    def set(self, key: K, value: V) -> V:
        """Insert or update `key`, mark it most recently used and return `value`."""

        handle = self._index.lookup(key)
        if handle is not None:
            self._recency.entry(handle).value = value
            self._recency.move_to_tail(handle)
            return value

        if self._recency and len(self._recency) >= self._capacity:
            self._evict_lru()

        handle = self._recency.append_tail(Entry(key, value))
        self._index.insert(key, handle)

        if self._capacity == 0:
            self._evict_lru()
        return value

    store = set

    def __setitem__(self, key: K, value: V) -> None:
        self.set(key, value)

    def update(self, other: Any = (), /, **kwds: V) -> None:
        # Reading another LRUHash through `[]` would reorder it mid-iteration.
        if isinstance(other, LRUHash):
            other = list(other.each_in_lru_order())
        super().update(other, **kwds)

    def delete(self, key: K) -> V | None:
        """Remove `key` and return its value, or None if it was absent."""

        handle = self._index.remove(key)
        if handle is None:
            return None
        return self._recency.unlink(handle).value

    def __delitem__(self, key: K) -> None:
        handle = self._index.remove(key)
        if handle is None:
            raise KeyError(key)
        self._recency.unlink(handle)

    def pop(self, key: K, default: Any = _MISSING) -> Any:
        handle = self._index.remove(key)
        if handle is None:
            if default is _MISSING:
                raise KeyError(key)
            return default
        return self._recency.unlink(handle).value

    def shift(self) -> tuple[K, V] | None:
        """Remove and return the least recently used `(key, value)` pair."""

        entry = self._pop_lru()
        if entry is None:
            return None
        return entry.key, entry.value

    def popitem(self) -> tuple[K, V]:
        """Remove and return the least recently used pair; KeyError when empty."""

        entry = self._pop_lru()
        if entry is None:
            raise KeyError("popitem(): cache is empty")
        return entry.key, entry.value

    def clear(self) -> None:
        dropped = len(self._recency)
        self._index.clear()
        self._recency.clear()
        logger.debug("Cleared %d entries", dropped)

    # -- observation ------------------------------------------------------

    def size(self) -> int:
        return len(self._recency)

    def __len__(self) -> int:
        return len(self._recency)

    def __iter__(self) -> Iterator[K]:
        for entry in self._recency.iter_lru():
            yield entry.key

    def __reversed__(self) -> Iterator[K]:
        for entry in self._recency.iter_mru():
            yield entry.key

    def each_in_lru_order(self) -> Iterator[tuple[K, V]]:
        """Yield `(key, value)` pairs from least to most recently used."""

        for entry in self._recency.iter_lru():
            yield entry.key, entry.value

    def each_in_mru_order(self) -> Iterator[tuple[K, V]]:
        """Yield `(key, value)` pairs from most to least recently used."""

        for entry in self._recency.iter_mru():
            yield entry.key, entry.value

    def keys(self) -> KeysView[K]:
        return _KeysView(self)

    def values(self) -> ValuesView[V]:
        return _ValuesView(self)

    def items(self) -> ItemsView[K, V]:
        return _ItemsView(self)

    def copy(self) -> LRUHash[K, V]:
        """Return a shallow copy with the same capacity and recency order."""

        return type(self)(self._capacity, self.each_in_lru_order())

    __copy__ = copy

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(capacity={self._capacity}, "
            f"entries={dict(self.each_in_lru_order())!r})"
        )

    def check_invariants(self) -> None:
        """Verify that the index and the recency list describe the same entries.

        Raises `LRUHashStructureError` on the first inconsistency found.
        """

        length = len(self._recency)
        if self._index.size() != length:
            raise LRUHashStructureError(
                f"Index holds {self._index.size()} keys but recency list holds {length}."
            )
        if length > self._capacity:
            raise LRUHashStructureError(
                f"Size {length} exceeds capacity {self._capacity}."
            )

        seen: set[int] = set()
        listed_keys = []
        prev: int | None = None
        handle = self._recency.head
        while handle is not None:
            if handle in seen:
                raise LRUHashStructureError(f"Recency list cycles back to handle {handle}.")
            entry = self._recency.entry(handle)
            if entry.prev != prev:
                raise LRUHashStructureError(
                    f"Broken back link at {entry.key!r}: {entry.prev} != {prev}."
                )
            if self._index.lookup(entry.key) != handle:
                raise LRUHashStructureError(
                    f"Index does not point at the listed entry for {entry.key!r}."
                )
            seen.add(handle)
            listed_keys.append(entry.key)
            prev = handle
            handle = entry.next

        if prev != self._recency.tail:
            raise LRUHashStructureError("Tail handle does not match the last listed entry.")
        if len(seen) != length:
            raise LRUHashStructureError(
                f"Walked {len(seen)} entries but recency list reports {length}."
            )
        if set(listed_keys) != set(self._index.keys()):
            raise LRUHashStructureError("Indexed keys differ from the keys in the recency list.")

    # -- internals --------------------------------------------------------

    def _peek(self, key: object) -> Entry[K, V] | None:
        handle = self._index.lookup(key)  # type: ignore[arg-type]
        if handle is None:
            return None
        return self._recency.entry(handle)

    def _pop_lru(self) -> Entry[K, V] | None:
        entry = self._recency.pop_head()
        if entry is not None:
            self._index.remove(entry.key)
        return entry

    def _evict_lru(self) -> None:
        entry = self._pop_lru()
        if entry is not None:
            logger.debug("Evicted %r (capacity=%d)", entry.key, self._capacity)
