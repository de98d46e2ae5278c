"""Document store backends used by the cache."""

from mongocache.storage.document_store.base import DocumentCollection, DocumentStore
from mongocache.storage.document_store.memory_store import MemoryCollection, MemoryDocumentStore
from mongocache.storage.document_store.mongo_store import MongoCollection, MongoDocumentStore

__all__ = [
    "DocumentCollection",
    "DocumentStore",
    "MemoryCollection",
    "MemoryDocumentStore",
    "MongoCollection",
    "MongoDocumentStore",
]
