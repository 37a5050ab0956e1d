"""In-process response cache with per-entry TTL."""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    Memoization layer for listings and TMDb lookups.

    Values are stored as JSON text, so callers get a fresh copy on every
    read. An entry is a miss once its TTL has elapsed. When the cache is
    full, expired entries are dropped first, then the oldest insertion.
    """

    def __init__(self, max_size: int = 500, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize cache.

        Args:
            max_size: Maximum number of live entries
            clock: Monotonic clock in seconds (injectable for tests)
        """
        self.max_size = max_size
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, payload = entry
        if self._clock() > expires_at:
            del self._entries[key]
            logger.debug(f"Cache expired: {key}")
            return None

        return json.loads(payload)

    def set(self, key: str, value: Any, ttl: int) -> None:
        """Store a JSON-serializable value, replacing any existing entry."""
        payload = json.dumps(value)
        self._entries.pop(key, None)

        if len(self._entries) >= self.max_size:
            self._purge_expired()
        while len(self._entries) >= self.max_size:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Cache full, evicted: {oldest}")

        self._entries[key] = (self._clock() + ttl, payload)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        """Sorted keys of live entries."""
        self._purge_expired()
        return sorted(self._entries)

    def status(self) -> dict[str, Any]:
        """Snapshot of live keys and a "count/max" size string."""
        keys = self.keys()
        return {"keys": keys, "size": f"{len(keys)}/{self.max_size}"}

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if now > expires_at]
        for key in expired:
            del self._entries[key]
