"""A fixed-capacity least-recently-used cache."""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    """Map keys to values, evicting the least recently used entry when full.

    ``on_evict(key, value)`` is called before an entry is dropped to make
    room; if it raises, the entry stays and the exception propagates.
    Entries dropped by ``remove`` or ``clear`` are not passed to it.
    """

    def __init__(
        self, capacity: int, on_evict: Optional[Callable[[K, V], None]] = None
    ) -> None:
        if capacity < 1:
            raise ValueError(f"cache capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._on_evict = on_evict
        self._entries: OrderedDict[K, V] = OrderedDict()

    def get(self, key: K) -> Optional[V]:
        """Return the value for ``key`` and mark it most recently used, or None."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: K, value: V) -> None:
        """Store ``value`` under ``key`` as the most recently used entry."""
        if key in self._entries:
            self._entries[key] = value
            self._entries.move_to_end(key)
            return
        if len(self._entries) >= self.capacity:
            old_key, old_value = next(iter(self._entries.items()))
            if self._on_evict is not None:
                self._on_evict(old_key, old_value)
            self._entries.pop(old_key, None)
        self._entries[key] = value

    def remove(self, key: K) -> Optional[V]:
        """Drop ``key`` without eviction handling; return its value or None."""
        return self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry without eviction handling."""
        self._entries.clear()

    def values(self) -> list[V]:
        """Return the values from least to most recently used."""
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries