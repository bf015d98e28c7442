"""
Infrastructure adapter: cachetools.TTLCache → ITTLCache.
The timer is injectable so tests can expire entries without sleeping.
"""

import time
from typing import Any, Callable, Optional

from cachetools import TTLCache

from divtrack.domain.ports.cache_port import ITTLCache


class CachetoolsTTLCache(ITTLCache):
    """In-process TTL cache shared by every request of the worker."""

    def __init__(
        self,
        ttl_seconds: float,
        maxsize: int = 1024,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)

    def get(self, key: str) -> Optional[Any]:
        return self._cache.get(key)

    def set(self, key: str, value: Any) -> None:
        self._cache[key] = value
