"""
Query caching layer.

Provides an in-memory TTL cache for table reads.  Entries are keyed by
the full `QueryDescriptor` (table, select, filters, order_by, limit,
offset) so identical reads inside the freshness window skip the backend.

The cache is read-through only: writes made through other paths do not
evict entries, so a result may be up to one TTL stale.  It is owned by a
`QueryService` instance rather than living at module level.
"""
from __future__ import annotations

import time
import threading
from dataclasses import dataclass
from typing import Any, Callable

from src.query.descriptor import QueryDescriptor
from src.core.logging import get_logger

logger = get_logger(__name__)


# ── Configuration ───────────────────────────────────────

DEFAULT_TTL_SECONDS = 300  # 5 minutes
DEFAULT_MAX_SIZE = 256


# ── Cache entry ─────────────────────────────────────────


@dataclass
class CacheEntry:
    """A single cached result."""
    key: str
    table: str
    value: Any
    created_at: float
    ttl: float
    hit_count: int = 0

    def is_expired(self, now: float) -> bool:
        return (now - self.created_at) >= self.ttl


# ── Cache implementation ────────────────────────────────


class QueryCache:
    """Thread-safe in-memory TTL cache for table reads.

    Parameters
    ----------
    ttl : float
        Time-to-live in seconds for each entry.
    max_size : int
        Maximum number of entries. Oldest entries are evicted when full.
    clock : callable, optional
        Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        max_size: int = DEFAULT_MAX_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._ttl = ttl
        self._max_size = max_size
        self._clock = clock
        self._hits = 0
        self._misses = 0

    # ── Public API ──────────────────────────────────────

    def get(self, descriptor: QueryDescriptor) -> Any | None:
        """Retrieve a cached result, or ``None`` on miss / expiry."""
        key = descriptor.cache_key()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.is_expired(self._clock()):
                del self._store[key]
                self._misses += 1
                return None
            entry.hit_count += 1
            self._hits += 1
            logger.debug("Cache HIT table=%s key=%s hits=%d", entry.table, key[:16], entry.hit_count)
            return entry.value

    def put(self, descriptor: QueryDescriptor, value: Any) -> None:
        """Store a result in the cache."""
        key = descriptor.cache_key()
        with self._lock:
            # Evict oldest if at capacity
            if len(self._store) >= self._max_size and key not in self._store:
                self._evict_oldest()
            self._store[key] = CacheEntry(
                key=key, table=descriptor.table, value=value,
                created_at=self._clock(), ttl=self._ttl,
            )
            size = len(self._store)
        logger.debug("Cache PUT table=%s key=%s size=%d", descriptor.table, key[:16], size)

    def contains(self, descriptor: QueryDescriptor) -> bool:
        """True when a fresh entry exists (does not touch hit/miss counters)."""
        with self._lock:
            entry = self._store.get(descriptor.cache_key())
            return entry is not None and not entry.is_expired(self._clock())

    def invalidate(self, descriptor: QueryDescriptor | None = None) -> int:
        """Remove specific entry or flush all. Returns number of entries removed."""
        with self._lock:
            if descriptor is None:
                count = len(self._store)
                self._store.clear()
                return count
            key = descriptor.cache_key()
            if key in self._store:
                del self._store[key]
                return 1
            return 0

    def invalidate_table(self, table: str) -> int:
        """Remove every entry read from *table*. Returns number removed."""
        with self._lock:
            keys = [k for k, v in self._store.items() if v.table == table]
            for k in keys:
                del self._store[k]
            return len(keys)

    def stats(self) -> dict[str, Any]:
        """Return cache statistics."""
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._store),
                "max_size": self._max_size,
                "ttl_seconds": self._ttl,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total, 3) if total else 0.0,
            }

    def cleanup_expired(self) -> int:
        """Remove all expired entries. Returns count removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, v in self._store.items() if v.is_expired(now)]
            for k in expired:
                del self._store[k]
            return len(expired)

    # ── Internals ───────────────────────────────────────

    def _evict_oldest(self) -> None:
        """Remove the entry with the earliest creation time."""
        if not self._store:
            return
        oldest_key = min(self._store, key=lambda k: self._store[k].created_at)
        del self._store[oldest_key]
