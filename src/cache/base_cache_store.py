# src/cache/base_cache_store.py - v2
"""Abstract persistent spritesheet store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from lpcsheet.cache.models import DiskCacheStats


class BaseSheetStore(ABC):
    """Unified interface for persistent spritesheet backends.

    Keys are fingerprints. A miss is a normal outcome (``None`` / ``False``),
    never an exception; backend I/O errors surface as StorageFailure.
    """

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Retrieve spritesheet bytes by fingerprint."""

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        """Store spritesheet bytes, replacing any existing entry."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove one entry. Returns False if it did not exist."""

    @abstractmethod
    async def clear(self) -> int:
        """Remove all entries. Returns the number deleted."""

    @abstractmethod
    async def list_entries(self) -> list[str]:
        """List fingerprints of all persisted entries."""

    @abstractmethod
    async def stats(self) -> DiskCacheStats:
        """Count and total size of all persisted entries."""

    async def contains(self, key: str) -> bool:
        return await self.get(key) is not None
