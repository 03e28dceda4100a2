"""In-process time-to-live caches.

Entries are stamped with a monotonic clock and dropped on the first read after
they go stale. There is no locking: concurrent requests may refresh the same
key twice and the last write wins.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    cached_at: float

    def is_stale(self, now: float, ttl: float) -> bool:
        return now - self.cached_at > ttl


class TTLCache(Generic[T]):
    """Bounded mapping whose entries expire ``ttl`` seconds after being set.

    When ``maxsize`` is reached the oldest insertion is evicted.
    """

    def __init__(self, ttl: float, maxsize: Optional[int] = None, clock: Clock = time.monotonic):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self.maxsize = maxsize
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry[T]]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_stale(self._clock(), self.ttl):
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: Hashable, value: T) -> None:
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(value=value, cached_at=self._clock())
        if self.maxsize is not None:
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
