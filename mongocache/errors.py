"""Exception hierarchy for mongocache."""


class CacheError(Exception):
    """Base class for all cache errors."""


class InvalidConfig(CacheError, ValueError):
    """Raised when cache options fail validation."""


class InvalidArgument(CacheError, TypeError):
    """Raised when an operation is called with a non-string key."""


class StoreError(CacheError):
    """Wraps a failure reported by the document store."""
