"""MongoDB document store backed by pymongo's asyncio client."""

import logging
from typing import Any

from bson.errors import BSONError
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from mongocache.consts import DEFAULT_DATABASE_NAME, DEFAULT_SERVER_SELECTION_TIMEOUT_MS
from mongocache.errors import StoreError
from mongocache.storage.document_store.base import (
    Document,
    DocumentCollection,
    DocumentStore,
    Filter,
)

logger = logging.getLogger(__name__)

# BSON encode/decode failures do not subclass PyMongoError
_DRIVER_ERRORS = (PyMongoError, BSONError)


def _delete_result(result: Any) -> dict[str, Any]:
    """Flatten a pymongo DeleteResult into a plain dict."""
    return {
        "acknowledged": result.acknowledged,
        "deleted_count": result.deleted_count if result.acknowledged else 0,
    }


class MongoCollection(DocumentCollection):
    """DocumentCollection over a pymongo AsyncCollection.

    PyMongoError and BSONError raised by the driver are re-raised as StoreError.
    """

    def __init__(self, collection: Any):
        self._collection = collection

    @property
    def name(self) -> str:
        return self._collection.name

    async def upsert_by_filter(self, filter: Filter, replacement: Document) -> Document | None:
        try:
            return await self._collection.find_one_and_replace(
                filter,
                replacement,
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except _DRIVER_ERRORS as e:
            raise StoreError(f"upsert into '{self.name}' failed: {e}") from e

    async def find_one(self, filter: Filter) -> Document | None:
        try:
            return await self._collection.find_one(filter)
        except _DRIVER_ERRORS as e:
            raise StoreError(f"find in '{self.name}' failed: {e}") from e

    async def delete_one(self, filter: Filter) -> dict[str, Any] | None:
        try:
            result = await self._collection.delete_one(filter)
        except _DRIVER_ERRORS as e:
            raise StoreError(f"delete from '{self.name}' failed: {e}") from e
        return _delete_result(result)

    async def delete_many(self, filter: Filter) -> dict[str, Any] | None:
        try:
            result = await self._collection.delete_many(filter)
        except _DRIVER_ERRORS as e:
            raise StoreError(f"bulk delete from '{self.name}' failed: {e}") from e
        return _delete_result(result)


class MongoDocumentStore(DocumentStore):
    """DocumentStore over a single MongoDB database."""

    def __init__(
        self,
        uri: str | None = None,
        database: str = DEFAULT_DATABASE_NAME,
        client: AsyncMongoClient | None = None,
        server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    ):
        """Initialize MongoDocumentStore.

        Args:
            uri: MongoDB connection string. Ignored when client is given.
            database: Database holding the cache collections.
            client: Existing client to reuse. The store will not close it.
            server_selection_timeout_ms: How long the driver waits for a server.
        """
        self._owns_client = client is None
        if client is None:
            # tz_aware so expiry instants come back as aware UTC datetimes
            client = AsyncMongoClient(
                uri,
                tz_aware=True,
                serverSelectionTimeoutMS=server_selection_timeout_ms,
            )
        self._client = client
        self._database = client[database]
        logger.debug(f"Mongo document store using database={database}")

    def collection(self, name: str) -> MongoCollection:
        return MongoCollection(self._database[name])

    async def close(self) -> None:
        if self._owns_client:
            await self._client.close()
            logger.debug("Closed MongoDB client")
