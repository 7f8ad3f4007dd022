"""A coarse-grained thread-safe wrapper around `LRUHash`.

Every operation on the wrapped cache, reads included (a read promotes the
entry), runs under one re-entrant lock. Iteration helpers return snapshots taken
under the lock instead of lazy iterators.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar

from lruhash.cache import DEFAULT_CAPACITY, LRUHash

K = TypeVar("K")
V = TypeVar("V")


class LockedLRUHash(Generic[K, V]):
    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        entries: Mapping[K, V] | Iterable[tuple[K, V]] | None = None,
    ) -> None:
        self._cache: LRUHash[Any, V] = LRUHash(capacity, entries)
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        with self._lock:
            return self._cache.capacity

    @capacity.setter
    def capacity(self, value: int) -> None:
        self.set_capacity(value)

    def set_capacity(self, capacity: int) -> None:
        with self._lock:
            self._cache.set_capacity(capacity)

    def get(self, key: K, default: V | None = None) -> V | None:
        with self._lock:
            return self._cache.get(key, default)

    def fetch(
        self,
        key: K,
        default: V | None = None,
        factory: Callable[[], V] | None = None,
    ) -> V | None:
        with self._lock:
            return self._cache.fetch(key, default, factory)

    def set(self, key: K, value: V) -> V:
        with self._lock:
            return self._cache.set(key, value)

    store = set

    def delete(self, key: K) -> V | None:
        with self._lock:
            return self._cache.delete(key)

    def shift(self) -> tuple[K, V] | None:
        with self._lock:
            return self._cache.shift()

    def pop(self, key: K, *default: V) -> V:
        with self._lock:
            return self._cache.pop(key, *default)

    def popitem(self) -> tuple[K, V]:
        with self._lock:
            return self._cache.popitem()

    def setdefault(self, key: K, default: V | None = None) -> V | None:
        with self._lock:
            return self._cache.setdefault(key, default)

    def update(self, other: Any = (), /, **kwds: V) -> None:
        if isinstance(other, LockedLRUHash):
            other = other.each_in_lru_order()
        with self._lock:
            self._cache.update(other, **kwds)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._cache)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._cache

    def __getitem__(self, key: K) -> V:
        with self._lock:
            return self._cache[key]

    def __setitem__(self, key: K, value: V) -> None:
        with self._lock:
            self._cache[key] = value

    def __delitem__(self, key: K) -> None:
        with self._lock:
            del self._cache[key]

    def each_in_lru_order(self) -> list[tuple[K, V]]:
        with self._lock:
            return list(self._cache.each_in_lru_order())

    def each_in_mru_order(self) -> list[tuple[K, V]]:
        with self._lock:
            return list(self._cache.each_in_mru_order())

    def items(self) -> list[tuple[K, V]]:
        return self.each_in_lru_order()

    def keys(self) -> list[K]:
        return [key for key, _value in self.each_in_lru_order()]

    def values(self) -> list[V]:
        return [value for _key, value in self.each_in_lru_order()]

    def copy(self) -> LockedLRUHash[K, V]:
        with self._lock:
            return type(self)(self._cache.capacity, self._cache.each_in_lru_order())

    __copy__ = copy

    def check_invariants(self) -> None:
        with self._lock:
            self._cache.check_invariants()

    def __repr__(self) -> str:
        with self._lock:
            return f"{type(self).__name__}({self._cache!r})"
