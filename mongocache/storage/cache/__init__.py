from mongocache.storage.cache.base import Cache
from mongocache.storage.cache.mongo_cache import MongoCache
from mongocache.storage.cache.sweeper import SweepTimer

__all__ = ["Cache", "MongoCache", "SweepTimer"]
