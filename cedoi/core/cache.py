"""
Simple in-memory cache with per-entry TTL (Time To Live) support.

Holds short-lived secrets such as pending one-time passwords. Entries expire
on their own; nothing here is durable or shared between processes.

Design decisions:
- OrderedDict storage for LRU eviction once max_size is reached
- Expiry stored with each entry and checked lazily on read
- Reentrant threading lock (RLock) so sync code run from async endpoints stays safe
- Injectable clock for deterministic expiry in tests
"""

import time
import threading
from typing import Any, Callable, Dict, Optional, Tuple
from collections import OrderedDict


class TTLCache:
    """
    Time-To-Live cache with thread-safe operations and LRU eviction.

    Storage format: OrderedDict[cache_key: (data, expires_at)]
    """

    def __init__(self, max_size: int = 1000, clock: Callable[[], float] = time.time):
        """
        Initialize TTL cache.

        Args:
            max_size: Maximum number of entries to store (default: 1000)
            clock: Returns the current time in seconds (default: time.time)
        """
        self._cache: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._lock = threading.RLock()
        self._max_size = max_size
        self._clock = clock
        self._hits = 0
        self._misses = 0
        self._expired = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if it is missing or expired."""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            data, expires_at = entry
            if self._clock() > expires_at:
                del self._cache[key]
                self._expired += 1
                self._misses += 1
                return None

            # Move to end to mark as recently used (LRU)
            self._cache.move_to_end(key)
            self._hits += 1
            return data

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """
        Store value for ttl_seconds.

        Implements LRU eviction: if cache is full, removes oldest entry.
        """
        with self._lock:
            if key in self._cache:
                del self._cache[key]

            self._cache[key] = (value, self._clock() + ttl_seconds)

            while len(self._cache) > self._max_size:
                self._cache.popitem(last=False)

    def invalidate(self, key: str) -> None:
        """Remove key from cache (for manual invalidation)."""
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear entire cache."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics for monitoring.

        Returns:
            Dictionary with size, max_size, hits, misses, expired and hit_rate_percent
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0

            return {
                "size": len(self._cache),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
                "expired": self._expired,
                "hit_rate_percent": round(hit_rate, 2),
            }
