"""
Port (interface) for time-bound caches.
Infrastructure adapters (e.g. CachetoolsTTLCache) must implement this interface.
Tests substitute a cache driven by a fake clock instead of wall-clock time.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class ITTLCache(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the live value for *key*, or None on a miss or expiry."""
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* for the cache's time-to-live."""
        ...
