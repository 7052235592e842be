# tests/unit/cache/test_unit_memory_store.py - v1
"""Tests for cache/memory_store.py - TTL expiry and the sweeper lifecycle."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from lpcsheet.cache.memory_store import MemoryCacheStore


class TestMemoryCacheStore:
    def test_put_get(self, memory_store):
        memory_store.put("k", b"v")
        assert memory_store.get("k") == b"v"
        assert len(memory_store) == 1

    def test_miss(self, memory_store):
        assert memory_store.get("nope") is None

    def test_expiry_on_read(self, memory_store, clock):
        memory_store.put("k", b"v")
        clock.advance(3599)
        assert memory_store.get("k") == b"v"
        clock.advance(1)
        assert memory_store.get("k") is None
        assert len(memory_store) == 0

    def test_custom_ttl(self, memory_store, clock):
        memory_store.put("k", b"v", ttl_s=10)
        clock.advance(11)
        assert memory_store.get("k") is None

    def test_reinsert_resets_expiry(self, memory_store, clock):
        memory_store.put("k", b"v1")
        clock.advance(3000)
        memory_store.put("k", b"v2")
        clock.advance(3000)
        assert memory_store.get("k") == b"v2"

    def test_sweep(self, memory_store, clock):
        memory_store.put("old", b"1", ttl_s=10)
        memory_store.put("new", b"2")
        clock.advance(20)
        assert memory_store.sweep() == 1
        assert len(memory_store) == 1
        assert memory_store.get("new") == b"2"

    def test_delete_and_clear(self, memory_store):
        memory_store.put("a", b"1")
        memory_store.put("b", b"2")
        assert memory_store.delete("a") is True
        assert memory_store.delete("a") is False
        assert memory_store.clear() == 1
        assert len(memory_store) == 0

    def test_invalid_ttl(self):
        with pytest.raises(ValueError):
            MemoryCacheStore(default_ttl_s=0)


class TestMemoryStoreLifecycle:
    @pytest.mark.asyncio
    async def test_start_close(self):
        store = MemoryCacheStore(check_period_s=60)
        store.start()
        assert store.running
        store.put("k", b"v")
        await store.close()
        assert not store.running
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_start_without_period(self, memory_store):
        memory_store.start()
        assert not memory_store.running
        await memory_store.close()

    @pytest.mark.asyncio
    async def test_sweeper_removes_expired(self, clock):
        store = MemoryCacheStore(default_ttl_s=5, check_period_s=0.01, clock=clock)
        store.put("k", b"v")
        clock.advance(10)
        store.start()
        for _ in range(100):
            if len(store) == 0:
                break
            await asyncio.sleep(0.01)
        assert len(store) == 0
        await store.close()


class TestMemoryStoreThreads:
    def test_concurrent_put_get_sweep(self):
        store = MemoryCacheStore(default_ttl_s=3600)
        workers, per_worker = 8, 200

        def work(worker: int) -> int:
            hits = 0
            for i in range(per_worker):
                key = f"{worker}-{i}"
                store.put(key, key.encode())
                if store.get(key) == key.encode():
                    hits += 1
                store.sweep()
            return hits

        with ThreadPoolExecutor(max_workers=workers) as pool:
            hits = list(pool.map(work, range(workers)))

        assert hits == [per_worker] * workers
        assert len(store) == workers * per_worker
        assert store.get("3-17") == b"3-17"

    def test_concurrent_expiry(self, clock):
        store = MemoryCacheStore(default_ttl_s=10, clock=clock)
        for i in range(500):
            store.put(str(i), b"x")
        clock.advance(11)

        with ThreadPoolExecutor(max_workers=4) as pool:
            removed = sum(pool.map(lambda _: store.sweep(), range(4)))

        assert removed == 500
        assert len(store) == 0
