"""Abstract base class for cache backends.

Caches provide temporary key-value storage with TTL (time-to-live) support.
Entries are evicted on expiry or when the cache is flushed.
"""

from abc import ABC, abstractmethod
from typing import Any


class Cache(ABC):
    """Abstract base class for async cache implementations.

    Write-style operations report their outcome as True, a raw backend
    result, or None when the backend returned nothing.
    """

    @abstractmethod
    async def set(self, key: str, item: Any) -> Any | None:
        """Store a value under key, replacing any existing entry.

        Args:
            key: Unique identifier for the cached value.
            item: Value to cache. Not inspected by the cache.

        Returns:
            True or the raw backend result on success, None otherwise.
        """
        ...

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Get a value from the cache.

        Args:
            key: Unique identifier for the cached value.

        Returns:
            Cached value if found and not expired, None otherwise.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> Any | None:
        """Delete the entry stored under key.

        Args:
            key: Unique identifier for the cached value.

        Returns:
            True or the raw backend result, None if the backend returned nothing.
        """
        ...

    @abstractmethod
    async def flush(self) -> Any | None:
        """Remove every entry from the cache.

        Returns:
            True or the raw backend result, None if the backend returned nothing.
        """
        ...
