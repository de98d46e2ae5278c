"""Abstract base classes for document store backends.

A document store hands out named collections of schema-less documents.
Documents cross this boundary as plain dicts; the cache never depends on
driver-specific document or result types.
"""

from abc import ABC, abstractmethod
from typing import Any

Document = dict[str, Any]
Filter = dict[str, Any]


class DocumentCollection(ABC):
    """A collection of schema-less documents.

    Each operation is a single round-trip and is expected to be atomic on
    its own. Implementations raise StoreError for backend failures.
    """

    @abstractmethod
    async def upsert_by_filter(self, filter: Filter, replacement: Document) -> Document | None:
        """Replace the document matching filter, inserting it if none matches.

        Args:
            filter: Query selecting at most one document.
            replacement: Full document body; existing fields are not merged.

        Returns:
            The document as stored after the replacement, or None.
        """
        ...

    @abstractmethod
    async def find_one(self, filter: Filter) -> Document | None:
        """Return the first document matching filter, or None."""
        ...

    @abstractmethod
    async def delete_one(self, filter: Filter) -> dict[str, Any] | None:
        """Delete at most one document matching filter.

        Returns:
            Result dict with "acknowledged" and "deleted_count", or None.
        """
        ...

    @abstractmethod
    async def delete_many(self, filter: Filter) -> dict[str, Any] | None:
        """Delete every document matching filter. An empty filter matches all.

        Returns:
            Result dict with "acknowledged" and "deleted_count", or None.
        """
        ...


class DocumentStore(ABC):
    """A database that owns named collections."""

    @abstractmethod
    def collection(self, name: str) -> DocumentCollection:
        """Get (creating lazily if needed) the collection called name."""
        ...

    async def close(self) -> None:
        """Release connections held by the store."""
        return None
