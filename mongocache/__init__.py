"""mongocache - a TTL key-value cache backed by MongoDB."""

from mongocache.errors import CacheError, InvalidArgument, InvalidConfig, StoreError
from mongocache.models import CacheConfig, CacheEntry, SweepState
from mongocache.storage import (
    Cache,
    DocumentCollection,
    DocumentStore,
    MemoryDocumentStore,
    MongoCache,
    MongoDocumentStore,
)

__all__ = [
    "Cache",
    "CacheConfig",
    "CacheEntry",
    "CacheError",
    "DocumentCollection",
    "DocumentStore",
    "InvalidArgument",
    "InvalidConfig",
    "MemoryDocumentStore",
    "MongoCache",
    "MongoDocumentStore",
    "StoreError",
    "SweepState",
]
