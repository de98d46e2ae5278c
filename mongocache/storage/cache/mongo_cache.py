"""TTL cache stored in a document database collection.

Each key maps to one document of the form {key, expire, data}. Expired
entries are removed in two ways:
- Lazily, when get() reads an entry whose expiry instant has passed
- In bulk, by a background sweep that runs while writes are outstanding

The sweep starts on the first set() and stands down once the expiry instant
of the most recent write has passed. flush() stops it immediately.
"""

import asyncio
import logging
from collections.abc import Awaitable
from datetime import datetime, timedelta
from typing import Any, TypeVar

from pydantic import ValidationError

from mongocache.consts import DEFAULT_CHECK_PERIOD, DEFAULT_COLLECTION_NAME, DEFAULT_TTL
from mongocache.errors import CacheError, InvalidArgument, InvalidConfig, StoreError
from mongocache.models.common import _utc_now
from mongocache.models.model_cache import CacheConfig, CacheEntry, SweepState
from mongocache.storage.cache.base import Cache
from mongocache.storage.cache.sweeper import SweepTimer
from mongocache.storage.document_store.base import DocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _require_key(key: Any) -> None:
    if not isinstance(key, str):
        raise InvalidArgument(f"key must be a string, got {type(key).__name__}")


class MongoCache(Cache):
    """Key-value cache with per-entry expiry over a DocumentStore collection.

    Usage:
        async with MongoCache(MongoDocumentStore(uri), ttl=60) as cache:
            await cache.set("user:1", {"name": "Alice"})
            user = await cache.get("user:1")

    flush_on_create only takes effect in open(). A cache built with the
    plain constructor must be opened (open(), create() or `async with`)
    before the collection is cleared.

    Store failures surface as StoreError unless ignore_store_error is set,
    in which case they are logged and the operation behaves as if the store
    returned nothing.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: CacheConfig | None = None,
        *,
        ttl: Any = DEFAULT_TTL,
        check_period: Any = DEFAULT_CHECK_PERIOD,
        flush_on_create: Any = False,
        collection_name: Any = DEFAULT_COLLECTION_NAME,
        ignore_store_error: Any = False,
        return_store_results: Any = False,
    ):
        """Initialize MongoCache.

        Options are validated here; the flush requested by flush_on_create
        runs in open() since it needs the event loop. Use create() or
        `async with` to construct and open in one step.

        Args:
            store: Document store that owns the backing collection.
            config: Prebuilt options. When given, the keyword options are ignored.
            ttl: Seconds an entry stays valid after it is written.
            check_period: Seconds between background expiry sweeps.
            flush_on_create: Clear the whole collection when the cache opens.
            collection_name: Name of the backing collection.
            ignore_store_error: Log store failures instead of raising them.
            return_store_results: Return raw store results instead of True.

        Raises:
            InvalidConfig: If any option has the wrong type or value.
        """
        if config is None:
            try:
                config = CacheConfig(
                    ttl=ttl,
                    check_period=check_period,
                    flush_on_create=flush_on_create,
                    collection_name=collection_name,
                    ignore_store_error=ignore_store_error,
                    return_store_results=return_store_results,
                )
            except ValidationError as e:
                raise InvalidConfig(f"Invalid cache options: {e}") from e
        elif not isinstance(config, CacheConfig):
            raise InvalidConfig(f"config must be a CacheConfig, got {type(config).__name__}")

        self.config = config
        self.store = store
        self.collection = store.collection(config.collection_name)
        self.last_expire_time: datetime | None = None
        self._sweeper = SweepTimer(self._delete_expired, config.check_period)
        self._background_tasks: set[asyncio.Task[None]] = set()
        if config.flush_on_create:
            logger.debug(f"Collection '{config.collection_name}' will be flushed when the cache is opened")

    @classmethod
    async def create(cls, store: DocumentStore, **options: Any) -> "MongoCache":
        """Construct a cache and open it (flushing first if configured)."""
        cache = cls(store, **options)
        await cache.open()
        return cache

    @property
    def ttl(self) -> float:
        return self.config.ttl

    @property
    def check_period(self) -> float:
        return self.config.check_period

    @property
    def sweep_state(self) -> SweepState:
        return self._sweeper.state

    async def open(self) -> None:
        if self.config.flush_on_create:
            await self.flush()

    async def close(self) -> None:
        """Stop the sweep and wait for pending lazy deletes. The store stays open."""
        self._sweeper.stop()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    async def __aenter__(self) -> "MongoCache":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _call_store(self, action: str, operation: Awaitable[T]) -> T | None:
        """Await a store operation, applying the ignore_store_error policy."""
        try:
            return await operation
        except StoreError as e:
            if not self.config.ignore_store_error:
                raise
            logger.error(f"Store error when {action}: {e}")
            return None

    def _result(self, result: Any) -> Any | None:
        if not result:
            return None
        return result if self.config.return_store_results else True

    async def set(self, key: str, item: Any) -> Any | None:
        """Store item under key for ttl seconds, replacing any previous entry.

        Starts the background sweep if it is not already running.

        Raises:
            InvalidArgument: If key is not a string.
            StoreError: If the store fails and ignore_store_error is off.
        """
        _require_key(key)
        expire = _utc_now() + timedelta(seconds=self.config.ttl)
        # Most recent write, not the maximum; the sweep stands down on this
        self.last_expire_time = expire
        entry = CacheEntry(key=key, expire=expire, data=item)

        result = await self._call_store(
            f"storing key={key}",
            self.collection.upsert_by_filter({"key": key}, entry.to_document()),
        )
        self._sweeper.start()
        logger.debug(f"Cached key={key} (expires {expire.isoformat()})")
        return self._result(result)

    async def get(self, key: str) -> Any | None:
        """Get the value stored under key.

        Returns:
            The stored value, or None if the key is missing or expired.
            Expired entries are deleted in the background.

        Raises:
            InvalidArgument: If key is not a string.
            StoreError: If the store fails and ignore_store_error is off.
        """
        _require_key(key)
        document = await self._call_store(
            f"reading key={key}",
            self.collection.find_one({"key": key}),
        )
        if not document:
            return None

        try:
            entry = CacheEntry.model_validate(document)
        except ValidationError as e:
            logger.warning(f"Unreadable cache entry for key={key}: {e}")
            return None

        if entry.is_expired(_utc_now()):
            logger.debug(f"Cache expired for key={key}")
            self._spawn_delete(key)
            return None
        return entry.data

    async def delete(self, key: str) -> Any | None:
        """Delete the entry stored under key.

        Raises:
            InvalidArgument: If key is not a string.
            StoreError: If the store fails and ignore_store_error is off.
        """
        _require_key(key)
        result = await self._call_store(
            f"deleting key={key}",
            self.collection.delete_one({"key": key}),
        )
        return self._result(result)

    async def flush(self) -> Any | None:
        """Stop the sweep and delete every entry in the collection.

        Raises:
            StoreError: If the store fails and ignore_store_error is off.
        """
        self._sweeper.stop()
        result = await self._call_store("flushing the cache", self.collection.delete_many({}))
        if result:
            logger.info(f"Flushed {result.get('deleted_count', 0)} entries from cache")
        return self._result(result)

    def _spawn_delete(self, key: str) -> None:
        """Delete key in a detached task the caller never waits on."""
        task = asyncio.get_running_loop().create_task(self._delete_quietly(key))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _delete_quietly(self, key: str) -> None:
        try:
            await self.delete(key)
        except CacheError as e:
            logger.warning(f"Failed to delete expired key={key}: {e}")

    async def _delete_expired(self) -> None:
        """One sweep pass: purge expired entries, then stand down if nothing is pending."""
        logger.debug("Running expiry sweep")
        now = _utc_now()
        result = await self._call_store(
            "purging expired entries",
            self.collection.delete_many({"expire": {"$lte": now}}),
        )
        if result and result.get("deleted_count"):
            logger.debug(f"Expiry sweep removed {result['deleted_count']} entries")

        if self.last_expire_time is None or now > self.last_expire_time:
            self._sweeper.stop()


async def _demo() -> None:
    from mongocache.storage.document_store.memory_store import MemoryDocumentStore

    store = MemoryDocumentStore()
    async with MongoCache(store, ttl=1, check_period=0.5) as cache:
        print("=== MongoCache Example ===\n")

        print("1. Storing values...")
        await cache.set("user:123", {"name": "Alice", "email": "alice@example.com"})
        await cache.set("config:app", {"debug": True, "version": "1.0"})
        print(f"   Sweep state: {cache.sweep_state.value}")

        print("\n2. Retrieving values...")
        print(f"   user:123 = {await cache.get('user:123')}")
        print(f"   config:app = {await cache.get('config:app')}")

        print("\n3. Deleting user:123...")
        await cache.delete("user:123")
        print(f"   user:123 after delete = {await cache.get('user:123')}")

        print("\n4. Waiting 2 seconds for expiry...")
        await asyncio.sleep(2)
        print(f"   Documents left in store: {len(cache.collection)}")
        print(f"   Sweep state: {cache.sweep_state.value}")


def main() -> None:
    """Example usage of MongoCache against the in-memory store."""
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(_demo())


if __name__ == "__main__":
    main()
