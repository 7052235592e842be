# src/cache/cache_factory.py - v3
"""Factories for the disk and memory cache tiers."""

from __future__ import annotations

from lpcsheet.cache.disk_store import DiskCacheStore
from lpcsheet.cache.memory_store import MemoryCacheStore
from lpcsheet.config.settings import Settings


def create_disk_store(settings: Settings | None = None) -> DiskCacheStore:
    """Instantiate the disk tier rooted at ``settings.cache_root``.

    The directory is created lazily on first write.
    """
    settings = settings or Settings()
    return DiskCacheStore(cache_root=settings.cache_root)


def create_memory_store(settings: Settings | None = None) -> MemoryCacheStore:
    """Instantiate an isolated memory tier (not started)."""
    settings = settings or Settings()
    return MemoryCacheStore(
        default_ttl_s=settings.memory_cache_ttl_s,
        check_period_s=settings.memory_cache_check_period_s,
    )
