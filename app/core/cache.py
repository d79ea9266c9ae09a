import hashlib
import math
import threading
import time
from collections.abc import Callable
from typing import Any, NamedTuple

from cachetools import TLRUCache
from loguru import logger


class CacheEntry(NamedTuple):
    value: Any
    expires_at: float


def _entry_expiry(_key: str, entry: CacheEntry, _now: float) -> float:
    # TLRUCache drops an entry once now >= expiry; an entry stays live through expires_at
    return math.nextafter(entry.expires_at, math.inf)


def build_cache_key(operation: str, *params: Any) -> str:
    """
    Build a fixed-length cache key from an operation name and its parameters.

    Parameters are joined in the order given, so callers must always pass them
    in the same order for the same operation. The joined string is hashed to
    keep keys short no matter how long a query string is.
    """
    raw = operation
    for param in params:
        raw += f":{param}"
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


class ExpiringCache:
    """
    In-process key/value cache with a per-entry time-to-live.

    There is no size bound. Stale entries are never returned; they are dropped
    when a read finds them expired, or in bulk by ``sweep()``. All operations
    hold the instance lock so the cache can be shared across request handlers
    and worker threads.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._store = self._new_store()

    def _new_store(self) -> TLRUCache:
        return TLRUCache(maxsize=math.inf, ttu=_entry_expiry, timer=self._clock)

    def get(self, key: str) -> tuple[Any, bool]:
        """Return ``(value, True)`` for a live entry, ``(None, False)`` otherwise."""
        with self._lock:
            entry = self._store.get(key)
            if entry is not None:
                return entry.value, True
            # drop the stale entry (if any) along with anything else that expired
            self._store.expire()
            return None, False

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store ``value`` for ``ttl`` seconds, replacing any previous entry."""
        with self._lock:
            if ttl <= 0:
                self._store.pop(key, None)
                return
            self._store[key] = CacheEntry(value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store = self._new_store()

    def sweep(self) -> int:
        """Remove every expired entry and return how many were dropped."""
        with self._lock:
            removed = len(self._store.expire())
        if removed:
            logger.debug(f"Cache sweep removed {removed} expired entries")
        return removed

    def __len__(self) -> int:
        """Number of live entries. Counting also drops anything that has expired."""
        with self._lock:
            return len(self._store)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._store
