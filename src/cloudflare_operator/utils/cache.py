"""Short-lived cache for upstream API reads."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Hashable

from .. import metrics

DEFAULT_TTL_SECONDS = 30.0

CacheKey = tuple[str, str]


def make_cache_key(resource_id: str, operation: str) -> CacheKey:
    """Create a cache key for one upstream read.

    Args:
        resource_id: Upstream identifier of the object (e.g. script name, pool ID)
        operation: Kind of read (e.g. "get_pool", "script_content")

    Returns:
        Cache key tuple
    """
    return (resource_id, operation)


class ResponseCache:
    """TTL memo of recent upstream reads, owned by a single client instance.

    Only read paths consult it. Writes never update or invalidate entries, so
    the first read after a write within the TTL can still see the old value;
    the next reconcile pass re-fetches once the entry expires.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.name = name
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[Hashable, tuple[Any, float]] = {}

    def get(self, key: Hashable) -> tuple[Any, bool]:
        """Return (payload, hit). Entries older than the TTL count as misses."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                metrics.cache_requests_total.labels(cache=self.name, result="miss").inc()
                return None, False

            payload, timestamp = entry
            if self._clock() - timestamp > self.ttl:
                del self._entries[key]
                metrics.cache_requests_total.labels(cache=self.name, result="expired").inc()
                return None, False

        metrics.cache_requests_total.labels(cache=self.name, result="hit").inc()
        return payload, True

    def set(self, key: Hashable, payload: Any) -> None:
        """Store a payload stamped with the current time."""
        with self._lock:
            self._entries[key] = (payload, self._clock())

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """Return the cached payload or call loader and cache its result.

        Errors from loader propagate and nothing is cached.
        """
        payload, hit = self.get(key)
        if hit:
            return payload
        payload = loader()
        self.set(key, payload)
        return payload

    def invalidate(self, resource_id: str | None = None) -> None:
        """Drop all entries, or only those belonging to one resource."""
        with self._lock:
            if resource_id is None:
                self._entries.clear()
                return
            for key in [k for k in self._entries if isinstance(k, tuple) and k and k[0] == resource_id]:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
