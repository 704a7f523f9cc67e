from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING = object()


class LRUCache(Generic[K, V]):
    """Fixed-capacity LRU cache: reads refresh recency, writes evict the oldest entry."""

    def __init__(self, max_size: int, name: str = "cache"):
        if max_size < 1:
            raise ValueError("LRU cache needs room for at least one entry")
        self.max_size = max_size
        self.name = name
        self._data: OrderedDict[K, V] = OrderedDict()

    def get(self, key: K, default=None):
        value = self._data.get(key, _MISSING)
        if value is _MISSING:
            return default
        # Move to end (most recently used)
        self._data.move_to_end(key)
        return value

    def put(self, key: K, value: V) -> None:
        if key in self._data:
            self._data.move_to_end(key)
        self._data[key] = value
        if len(self._data) > self.max_size:
            oldest, _ = self._data.popitem(last=False)
            logger.debug(f"{self.name}: evicted {oldest!r}")

    def clear(self) -> int:
        """Drop every entry. Returns how many were dropped."""
        count = len(self._data)
        self._data.clear()
        if count:
            logger.debug(f"{self.name}: cleared {count} entries")
        return count

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
