"""Pydantic models for mongocache."""

from mongocache.models.model_cache import CacheConfig, CacheEntry, SweepState

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "SweepState",
]
