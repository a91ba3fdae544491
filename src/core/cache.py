"""Generic LRU cache with TTL and statistics."""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .hash import hash_string, Algorithm

T = TypeVar("T")


@dataclass
class Stats:
    """Cache statistics."""

    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        """Hit rate between 0.0 and 1.0."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "hit_rate": self.hit_rate,
        }


@dataclass
class _Entry(Generic[T]):
    value: T
    stored_at: float


class LRUCache(Generic[T]):
    """
    LRU cache with optional TTL.

    Keys are hashed with xxhash so arbitrarily large strings (serialised app
    descriptions, for instance) can be used directly.

    Examples:
        >>> cache = LRUCache[str](max_size=2)
        >>> cache.set("key", "value")
        >>> cache.get("key")
        'value'
    """

    def __init__(
        self,
        max_size: int = 100,
        ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, _Entry[T]] = OrderedDict()
        self._stats = Stats(max_size=max_size)

    @staticmethod
    def _key(key: str) -> str:
        return hash_string(key, Algorithm.XXHASH64)

    def _expired(self, entry: _Entry[T]) -> bool:
        if self.ttl_seconds is None:
            return False
        return self._clock() - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> T | None:
        """Return the cached value, or None when missing or expired."""
        cache_key = self._key(key)
        entry = self._entries.get(cache_key)

        if entry is None or self._expired(entry):
            if entry is not None:
                del self._entries[cache_key]
                self._stats.size = len(self._entries)
            self._stats.misses += 1
            return None

        self._entries.move_to_end(cache_key)
        self._stats.hits += 1
        return entry.value

    def set(self, key: str, value: T) -> None:
        """Store value, evicting the least recently used entry when full."""
        cache_key = self._key(key)
        self._entries.pop(cache_key, None)
        self._entries[cache_key] = _Entry(value, self._clock())

        if len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
            self._stats.evictions += 1

        self._stats.size = len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._stats.size = 0

    @property
    def stats(self) -> Stats:
        return self._stats

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Membership check (does not touch LRU order or stats)."""
        return self._key(key) in self._entries


__all__ = ["LRUCache", "Stats"]
