# src/cache/disk_store.py - v3
"""Filesystem spritesheet store (the disk tier).

One PNG file per fingerprint under the cache root; the directory listing is
the index. Writes go to a unique temp file first and are moved into place
with os.replace, so a reader never sees a partially written entry.
Blocking filesystem calls run in worker threads.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import stat
import uuid
from pathlib import Path

from lpcsheet.cache.base_cache_store import BaseSheetStore
from lpcsheet.cache.fingerprint import is_fingerprint
from lpcsheet.cache.models import DiskCacheStats
from lpcsheet.core.errors import StorageFailure

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".png"
_TEMP_SUFFIX = ".tmp"


class DiskCacheStore(BaseSheetStore):
    """Directory of ``<fingerprint>.png`` blobs."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    async def get(self, key: str) -> bytes | None:
        """Read an entry. Missing or malformed keys are a miss."""
        if not is_fingerprint(key):
            return None
        return await asyncio.to_thread(self._read, key)

    async def put(self, key: str, data: bytes) -> None:
        """Persist an entry atomically, creating the cache root if needed."""
        if not is_fingerprint(key):
            raise StorageFailure("put", key, ValueError("not a fingerprint"))
        await asyncio.to_thread(self._write, key, data)

    async def contains(self, key: str) -> bool:
        if not is_fingerprint(key):
            return False
        return await asyncio.to_thread(self._exists, key)

    async def delete(self, key: str) -> bool:
        if not is_fingerprint(key):
            return False
        return await asyncio.to_thread(self._unlink, key)

    async def clear(self) -> int:
        keys = await self.list_entries()
        deleted = 0
        for key in keys:
            if await asyncio.to_thread(self._unlink, key):
                deleted += 1
        logger.info("Disk cache cleared: %d entries deleted", deleted)
        return deleted

    async def list_entries(self) -> list[str]:
        return await asyncio.to_thread(self._scan)

    async def stats(self) -> DiskCacheStats:
        return await asyncio.to_thread(self._stats)

    def entry_path(self, key: str) -> Path:
        """Return file path for a fingerprint."""
        return self._root / f"{key}{ENTRY_SUFFIX}"

    # --- blocking helpers (worker threads) ---

    def _read(self, key: str) -> bytes | None:
        try:
            return self.entry_path(key).read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageFailure("get", key, e) from e

    def _exists(self, key: str) -> bool:
        try:
            mode = self.entry_path(key).stat().st_mode
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as e:
            raise StorageFailure("contains", key, e) from e
        return stat.S_ISREG(mode)

    def _write(self, key: str, data: bytes) -> None:
        path = self.entry_path(key)
        tmp = path.with_name(f".{key}.{uuid.uuid4().hex}{_TEMP_SUFFIX}")
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            with open(tmp, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StorageFailure("put", key, e) from e
        logger.debug("Wrote %s (%d bytes)", path.name, len(data))

    def _unlink(self, key: str) -> bool:
        try:
            self.entry_path(key).unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageFailure("delete", key, e) from e
        return True

    def _scan(self) -> list[str]:
        if not self._root.is_dir():
            return []
        try:
            names = os.listdir(self._root)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageFailure("list", None, e) from e
        keys = []
        for name in names:
            stem, suffix = os.path.splitext(name)
            if suffix == ENTRY_SUFFIX and is_fingerprint(stem):
                keys.append(stem)
        return sorted(keys)

    def _stats(self) -> DiskCacheStats:
        count = 0
        total = 0
        for key in self._scan():
            try:
                total += self.entry_path(key).stat().st_size
            except FileNotFoundError:
                # Deleted between scan and stat.
                continue
            except OSError as e:
                raise StorageFailure("stats", key, e) from e
            count += 1
        return DiskCacheStats(count=count, total_bytes=total)
