"""Pytest configuration and fixtures."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from mongocache.errors import StoreError
from mongocache.models.common import _utc_now
from mongocache.storage.cache.mongo_cache import MongoCache
from mongocache.storage.document_store.memory_store import MemoryCollection, MemoryDocumentStore


@pytest.fixture
def memory_store() -> MemoryDocumentStore:
    """Create an empty in-process document store."""
    return MemoryDocumentStore()


@pytest.fixture
def collection(memory_store: MemoryDocumentStore) -> MemoryCollection:
    """The default cache collection, for inspecting the store directly."""
    return memory_store.collection("cache")


@pytest.fixture
def cache(memory_store: MemoryDocumentStore) -> MongoCache:
    """Create a cache whose sweep never fires during a test."""
    return MongoCache(memory_store, ttl=10, check_period=60)


def make_mock_store(collection: MagicMock) -> MagicMock:
    """Wrap a mocked collection in a mocked DocumentStore."""
    store = MagicMock()
    store.collection.return_value = collection
    store.close = AsyncMock()
    return store


@pytest.fixture
def failing_collection() -> MagicMock:
    """A collection where every operation fails with StoreError."""
    collection = MagicMock()
    error = StoreError("connection refused")
    collection.upsert_by_filter = AsyncMock(side_effect=error)
    collection.find_one = AsyncMock(side_effect=error)
    collection.delete_one = AsyncMock(side_effect=error)
    collection.delete_many = AsyncMock(side_effect=error)
    return collection


@pytest.fixture
def failing_store(failing_collection: MagicMock) -> MagicMock:
    """A document store handing out the failing collection."""
    return make_mock_store(failing_collection)


@pytest.fixture
def expired_document() -> dict:
    """A stored entry whose expiry instant is in the past."""
    return {"key": "stale", "expire": _utc_now() - timedelta(seconds=5), "data": "old"}
