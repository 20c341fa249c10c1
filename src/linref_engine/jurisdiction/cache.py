"""
TTL cache for jurisdiction snapshots.

The resolver receives a cache through its constructor, so callers can share
one process-wide cache, plug in an external one, or use a fake clock in tests.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class JurisdictionCache(ABC):
    """Get-or-populate cache with time-to-live and explicit invalidation."""

    @abstractmethod
    def remember(self, key: str, ttl_seconds: float, populate: Callable[[], Any]) -> Any:
        """Return the cached value for key, calling populate when missing or expired.

        Args:
            key: Cache key
            ttl_seconds: Time-to-live for a freshly populated value
            populate: Zero-argument callable producing the value

        Returns:
            Cached or freshly populated value
        """
        pass

    @abstractmethod
    def forget(self, key: str) -> None:
        """Invalidate the value stored under key (no-op if absent)."""
        pass


class InMemoryTTLCache(JurisdictionCache):
    """Process-local TTL cache.

    The lock only guards the dict. populate runs outside it, so two threads
    missing at the same time both compute and the last write wins.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """Initialize cache.

        Args:
            clock: Monotonic time source in seconds (default: time.monotonic)
        """
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _lookup(self, key: str) -> Tuple[bool, Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return False, None

            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                self.misses += 1
                return False, None

            self.hits += 1
            return True, value

    def remember(self, key: str, ttl_seconds: float, populate: Callable[[], Any]) -> Any:
        found, value = self._lookup(key)
        if found:
            return value

        logger.debug(f"Cache miss for {key}, populating (ttl={ttl_seconds}s)")
        value = populate()

        with self._lock:
            self._entries[key] = (self._clock() + ttl_seconds, value)

        return value

    def forget(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
        logger.debug(f"Cache entry {key} invalidated")

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()

    def get_statistics(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with entry count, hits and misses
        """
        with self._lock:
            return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}
