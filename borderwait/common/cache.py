"""
Explicit time-to-live cache values.

The owner of a cache passes the current time in; nothing here reads a clock,
and nothing is held at module level.
"""
import threading
from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CachedValue(Generic[T]):
    value: T
    fetched_at_ms: int

    def age_ms(self, now_ms: int) -> int:
        return max(0, now_ms - self.fetched_at_ms)

    def is_fresh(self, now_ms: int, ttl_ms: int) -> bool:
        return self.age_ms(now_ms) < ttl_ms


class TTLCache(Generic[T]):
    """
    Keyed store of `CachedValue`s that expire `ttl_ms` after they were fetched.
    Safe to share between request threads.
    """

    def __init__(self, ttl_ms: int):
        self.ttl_ms = ttl_ms
        self._entries: Dict[str, CachedValue[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: str, now_ms: int) -> Optional[CachedValue[T]]:
        """The fresh entry for `key`, or None. Expired entries are dropped."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_fresh(now_ms, self.ttl_ms):
                self._entries.pop(key, None)
                return None
            return entry

    def put(self, key: str, value: T, now_ms: int) -> CachedValue[T]:
        entry = CachedValue(value=value, fetched_at_ms=now_ms)
        with self._lock:
            self._entries[key] = entry
        return entry

    def invalidate(self, prefix: str = ""):
        """Drops every entry whose key starts with `prefix` (all entries by default)."""
        with self._lock:
            for key in [k for k in self._entries if k.startswith(prefix)]:
                self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
