"""Storage layer for mongocache.

This module provides:
- Cache: Abstract base class for caching
- MongoCache: TTL cache over a document collection
- DocumentStore / DocumentCollection: Abstract document store backend
- MongoDocumentStore: MongoDB backend (pymongo asyncio client)
- MemoryDocumentStore: In-process backend for development and tests
"""

from mongocache.storage.cache.base import Cache
from mongocache.storage.cache.mongo_cache import MongoCache
from mongocache.storage.document_store.base import DocumentCollection, DocumentStore
from mongocache.storage.document_store.memory_store import MemoryDocumentStore
from mongocache.storage.document_store.mongo_store import MongoDocumentStore

__all__ = [
    "Cache",
    "DocumentCollection",
    "DocumentStore",
    "MemoryDocumentStore",
    "MongoCache",
    "MongoDocumentStore",
]
