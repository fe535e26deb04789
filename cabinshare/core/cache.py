"""
In-memory TTL cache for role records.

One instance is created per process and injected into the role store;
entries are invalidated explicitly whenever a user's roles change.
"""

import time
from threading import Lock
from typing import Any, Callable, Optional

from cabinshare.core.logging_config import logger


class CacheEntry:
    """Represents a cached value with expiration time."""

    def __init__(self, value: Any, expires_at: float):
        self.value = value
        self.expires_at = expires_at


class TTLCache:
    """
    Simple in-memory cache with TTL support.

    Thread-safe for concurrent access. A ttl of 0 disables storage, so
    every get() is a miss.
    """

    def __init__(self, ttl_seconds: int = 60, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}
        self._lock = Lock()

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, key: str) -> Optional[Any]:
        """
        Get a value from the cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or expired
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if self._clock() >= entry.expires_at:
                del self._cache[key]
                return None

            return entry.value

    def set(self, key: str, value: Any):
        """
        Set a value in the cache for ttl_seconds.

        Args:
            key: Cache key
            value: Value to cache
        """
        if not self.enabled:
            return
        with self._lock:
            self._cache[key] = CacheEntry(value, self._clock() + self.ttl_seconds)

    def delete(self, key: str):
        """
        Delete a value from the cache.

        Args:
            key: Cache key
        """
        with self._lock:
            if self._cache.pop(key, None) is not None:
                logger.debug(f"Cache invalidated: {key}")

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        """Get the number of entries in the cache."""
        with self._lock:
            return len(self._cache)
