"""Owner record cache with an optional LRU bound.

By default the cache never evicts: every owner touched through the write
path stays cached for the life of the process. A positive ``max_size``
turns on least-recently-used eviction for hosts with unbounded owner
populations. Evicting is always safe because every mutation is persisted
before it returns.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class OwnerCache(Generic[K, V]):
    """Mapping of owner id to cached record.

    Example:
        cache = OwnerCache(max_size=2)
        cache.put("a", rec_a)
        cache.put("b", rec_b)
        cache.get("a")          # a is now most recently used
        cache.put("c", rec_c)   # evicts b
    """

    def __init__(self, max_size: int = 0) -> None:
        self._max_size = max_size
        self._items: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.RLock()
        self._evictions = 0

    @property
    def max_size(self) -> int:
        """Maximum number of entries, 0 or less meaning unbounded."""
        return self._max_size

    @property
    def bounded(self) -> bool:
        return self._max_size > 0

    def get(self, key: K) -> V | None:
        """Return the cached value and mark it recently used."""
        with self._lock:
            value = self._items.get(key)
            if value is not None:
                self._items.move_to_end(key)
            return value

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            self._evict_if_needed()

    def setdefault(self, key: K, value: V) -> V:
        """Insert ``value`` unless ``key`` is cached; return the cached value.

        This is the atomic check-then-insert used by the write path.
        """
        with self._lock:
            existing = self._items.get(key)
            if existing is not None:
                self._items.move_to_end(key)
                return existing
            self._items[key] = value
            self._evict_if_needed()
            return value

    def pop(self, key: K) -> V | None:
        with self._lock:
            return self._items.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def _evict_if_needed(self) -> None:
        if not self.bounded:
            return
        while len(self._items) > self._max_size:
            self._items.popitem(last=False)
            self._evictions += 1

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[K]:
        with self._lock:
            return iter(list(self._items))

    def stats(self) -> dict[str, Any]:
        """Return cache statistics."""
        with self._lock:
            return {
                "size": len(self._items),
                "max_size": self._max_size,
                "evictions": self._evictions,
            }
