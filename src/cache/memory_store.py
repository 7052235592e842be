# src/cache/memory_store.py - v1
"""In-process TTL store (the memory tier).

Holds spritesheets generated during this process lifetime. Expired entries
read as misses even before the sweeper physically removes them. Nothing is
persisted; a restart empties the store.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TTL_S = 3600.0
DEFAULT_CHECK_PERIOD_S = 600.0


@dataclass(frozen=True)
class _Entry:
    data: bytes
    expires_at: float


class MemoryCacheStore:
    """Thread-safe key -> bytes store with per-entry expiry.

    Args:
        default_ttl_s: TTL applied when ``put`` is called without one.
        check_period_s: Interval of the background sweep started by ``start()``.
            0 disables the sweeper; expiry then happens lazily on read.
        clock: Monotonic time source (seconds). Injected for tests.
    """

    def __init__(
        self,
        default_ttl_s: float = DEFAULT_TTL_S,
        check_period_s: float = DEFAULT_CHECK_PERIOD_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl_s <= 0:
            raise ValueError("default_ttl_s must be > 0")
        self._default_ttl_s = default_ttl_s
        self._check_period_s = check_period_s
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task[None] | None = None

    @property
    def default_ttl_s(self) -> float:
        return self._default_ttl_s

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return entry.data

    def put(self, key: str, data: bytes, ttl_s: float | None = None) -> None:
        """Insert or replace an entry; re-insertion resets its expiry."""
        ttl = self._default_ttl_s if ttl_s is None else ttl_s
        with self._lock:
            self._entries[key] = _Entry(data=data, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def sweep(self) -> int:
        """Remove expired entries. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.expires_at <= now]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Memory cache sweep removed %d entries", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # --- lifecycle ---

    def start(self) -> None:
        """Start the periodic sweeper on the running event loop."""
        if self._check_period_s <= 0 or self._sweeper is not None:
            return
        self._sweeper = asyncio.get_running_loop().create_task(
            self._sweep_forever(), name="memory-cache-sweeper"
        )

    async def close(self) -> None:
        """Stop the sweeper and drop all entries."""
        if self._sweeper is not None:
            self._sweeper.cancel()
            try:
                await self._sweeper
            except asyncio.CancelledError:
                pass
            self._sweeper = None
        self.clear()

    @property
    def running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._check_period_s)
            self.sweep()
