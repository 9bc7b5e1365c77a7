"""
Caller-owned TTL cache and a rate limiter built on it.

Nothing in the engine keeps module-level state; a cache or limiter only
exists when the caller creates one and passes it in.
"""

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock
from typing import Any, Hashable, Optional

from scheduling_engine.config import settings

logger = logging.getLogger(__name__)

UNBOUNDED = 0


class TTLCache:
    """Bounded mapping whose entries expire ``ttl_seconds`` after being set.

    Expired entries are dropped when read and before every write. When
    still full, the oldest entry is evicted first. ``max_entries=UNBOUNDED``
    disables the size bound, leaving expiry as the only way out.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.cache.ttl_seconds
        self.max_entries = max_entries if max_entries is not None else settings.cache.max_entries
        if self.ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be > 0, got {self.ttl_seconds}")
        if self.max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {self.max_entries}")
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self._lock = Lock()

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return default
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._drop_expired_oldest()
            while self._is_full():
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full, evicted %r", evicted)
            self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def update(self, key: Hashable, value: Any) -> bool:
        """Replace a live entry's value without extending its expiry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry[0] <= self._clock():
                return False
            self._entries[key] = (entry[0], value)
            return True

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._entries)

    def _is_full(self) -> bool:
        return self.max_entries != UNBOUNDED and len(self._entries) >= self.max_entries

    def _drop_expired_oldest(self) -> None:
        # entries share one ttl, so insertion order is expiry order
        now = self._clock()
        while self._entries:
            key, (expires_at, _) = next(iter(self._entries.items()))
            if expires_at > now:
                break
            del self._entries[key]

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]:
            del self._entries[key]


class RateLimiter:
    """Fixed-window attempt counter keyed by caller identity."""

    def __init__(
        self,
        limit: Optional[int] = None,
        window_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit if limit is not None else settings.cache.commit_attempts_per_window
        window = window_seconds if window_seconds is not None else settings.cache.commit_window_seconds
        # no size bound: a counter only leaves by expiry
        self._counts = TTLCache(ttl_seconds=window, max_entries=UNBOUNDED, clock=clock)
        self._lock = Lock()

    def hit(self, key: Hashable) -> bool:
        """Record one attempt; return False once the window's limit is exceeded."""
        with self._lock:
            count = self._counts.get(key, 0) + 1
            if count == 1 or not self._counts.update(key, count):
                count = 1
                self._counts.set(key, count)
        allowed = count <= self.limit
        if not allowed:
            logger.warning("Rate limit exceeded for %r (%d/%d)", key, count, self.limit)
        return allowed

    def reset(self) -> None:
        self._counts.clear()
