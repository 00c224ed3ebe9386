"""Tests for ResourceCache and NullCache."""

import asyncio
import threading
import time

import pytest

from gateway_sync.apisix.cache import NullCache, ResourceCache
from gateway_sync.apisix.errors import CacheNotSyncedError
from gateway_sync.apisix.models import PluginConfig


class TestResourceCache:
    """Test the lock-guarded cache."""

    def test_get_miss(self) -> None:
        """Test a miss returns None instead of raising."""
        assert ResourceCache().get("plugin_configs", "1") is None

    def test_put_get_delete(self) -> None:
        cache = ResourceCache()
        cache.put("plugin_configs", "1", PluginConfig(id="1", plugins={"a": 1}))

        assert cache.get("plugin_configs", "1").plugins == {"a": 1}  # type: ignore[union-attr]
        assert cache.get("routes", "1") is None

        cache.delete("plugin_configs", "1")
        cache.delete("plugin_configs", "1")
        assert cache.get("plugin_configs", "1") is None

    def test_entries_are_copies(self) -> None:
        """Test callers cannot mutate cached state through returned objects."""
        cache = ResourceCache()
        obj = PluginConfig(id="1", plugins={"a": 1})
        cache.put("plugin_configs", "1", obj)

        obj.plugins["b"] = 2
        cached = cache.get("plugin_configs", "1")
        cached.plugins["c"] = 3  # type: ignore[union-attr]

        assert cache.get("plugin_configs", "1").plugins == {"a": 1}  # type: ignore[union-attr]

    def test_list_sorted_by_id(self) -> None:
        cache = ResourceCache()
        for resource_id in ["b", "c", "a"]:
            cache.put("plugin_configs", resource_id, PluginConfig(id=resource_id))

        assert [o.id for o in cache.list("plugin_configs")] == ["a", "b", "c"]
        assert cache.list("routes") == []

    def test_replace(self) -> None:
        cache = ResourceCache()
        cache.put("plugin_configs", "old", PluginConfig(id="old"))

        cache.replace("plugin_configs", [PluginConfig(id="2"), PluginConfig(id="1")])

        assert [o.id for o in cache.list("plugin_configs")] == ["1", "2"]

    def test_concurrent_writers(self) -> None:
        """Test puts from many threads are all retained."""
        cache = ResourceCache()

        def _writer(prefix: str) -> None:
            for i in range(200):
                cache.put("routes", f"{prefix}-{i:03d}", PluginConfig(id=f"{prefix}-{i:03d}"))

        threads = [threading.Thread(target=_writer, args=(str(n),)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache.list("routes")) == 1600

    @pytest.mark.asyncio
    async def test_wait_synced_timeout(self) -> None:
        cache = ResourceCache()

        with pytest.raises(CacheNotSyncedError):
            await cache.wait_synced(timeout=0.01)
        assert not cache.synced

    @pytest.mark.asyncio
    async def test_mark_synced_releases_waiters(self) -> None:
        cache = ResourceCache()
        waiter = asyncio.create_task(cache.wait_synced())
        await asyncio.sleep(0)

        cache.mark_synced()
        await asyncio.wait_for(waiter, 1)

        assert cache.synced

    @pytest.mark.asyncio
    async def test_mark_synced_from_another_thread(self) -> None:
        """Test a gate opened off the event loop releases waiters promptly."""
        cache = ResourceCache()
        waiter = asyncio.create_task(cache.wait_synced())
        await asyncio.sleep(0)

        opener = threading.Timer(0.05, cache.mark_synced)
        start = time.perf_counter()
        opener.start()
        done, _ = await asyncio.wait({waiter}, timeout=3)
        opener.join()

        assert waiter in done
        assert time.perf_counter() - start < 1.0
        assert cache.synced


class TestNullCache:
    """Test the no-op cache."""

    @pytest.mark.asyncio
    async def test_always_ready_and_empty(self) -> None:
        cache = NullCache()
        cache.put("plugin_configs", "1", PluginConfig(id="1"))

        await cache.wait_synced(timeout=0)

        assert cache.synced
        assert cache.get("plugin_configs", "1") is None
        assert cache.list("plugin_configs") == []
