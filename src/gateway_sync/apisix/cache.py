"""Process-local cache of admin API resources.

Entries are namespaced by collection (``plugin_configs``, ``routes`` ...)
and keyed by resource identifier. The cache also owns the one-shot
readiness gate that is opened once the initial full listing has been
absorbed.
"""

from __future__ import annotations

import asyncio
import builtins
import logging
import threading
from collections.abc import Iterable
from typing import Protocol

from gateway_sync.apisix.errors import CacheNotSyncedError
from gateway_sync.apisix.models import Metadata

logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Cache contract used by the admin API clients."""

    def get(self, collection: str, resource_id: str) -> Metadata | None:
        """Return the last known object, or None on a miss."""
        ...

    def put(self, collection: str, resource_id: str, obj: Metadata) -> None:
        """Store the object under its identifier."""
        ...

    def delete(self, collection: str, resource_id: str) -> None:
        """Forget the identifier; a miss is not an error."""
        ...

    def list(self, collection: str) -> builtins.list[Metadata]:
        """Snapshot of a collection ordered by identifier."""
        ...

    def replace(self, collection: str, objs: Iterable[Metadata]) -> None:
        """Replace a whole collection with a fresh listing."""
        ...

    @property
    def synced(self) -> bool:
        """Whether the readiness gate is open."""
        ...

    def mark_synced(self) -> None:
        """Open the readiness gate."""
        ...

    async def wait_synced(self, timeout: float | None = None) -> None:
        """Block until the readiness gate opens."""
        ...


async def _wait_event(event: asyncio.Event, timeout: float | None) -> None:
    if event.is_set():
        return
    try:
        await asyncio.wait_for(event.wait(), timeout)
    except asyncio.TimeoutError as e:
        raise CacheNotSyncedError(f"cache not synced after {timeout}s") from e


class ResourceCache:
    """Lock-guarded in-memory cache.

    Objects are copied on the way in and on the way out, so callers never
    share mutable state with the cache.

    Example::

        cache = ResourceCache()
        cache.replace("routes", await route_client.list_remote())
        cache.mark_synced()
        route = cache.get("routes", "1")
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, dict[str, Metadata]] = {}
        self._synced = asyncio.Event()
        self._ready = False
        self._loop: asyncio.AbstractEventLoop | None = None

    def get(self, collection: str, resource_id: str) -> Metadata | None:
        with self._lock:
            obj = self._store.get(collection, {}).get(resource_id)
        return obj.model_copy(deep=True) if obj is not None else None

    def put(self, collection: str, resource_id: str, obj: Metadata) -> None:
        obj = obj.model_copy(deep=True)
        with self._lock:
            self._store.setdefault(collection, {})[resource_id] = obj

    def delete(self, collection: str, resource_id: str) -> None:
        with self._lock:
            self._store.get(collection, {}).pop(resource_id, None)

    def list(self, collection: str) -> builtins.list[Metadata]:
        with self._lock:
            entries = sorted(self._store.get(collection, {}).items())
        return [obj.model_copy(deep=True) for _, obj in entries]

    def replace(self, collection: str, objs: Iterable[Metadata]) -> None:
        fresh = {obj.id: obj.model_copy(deep=True) for obj in objs}
        with self._lock:
            self._store[collection] = fresh
        logger.debug(f"Cache collection {collection} replaced with {len(fresh)} entries")

    @property
    def synced(self) -> bool:
        with self._lock:
            return self._ready

    def mark_synced(self) -> None:
        """Open the readiness gate.

        May be called from any thread. Waiters are woken on the event loop
        they are waiting on.
        """
        with self._lock:
            if self._ready:
                return
            self._ready = True
            loop = self._loop
        logger.info("Cache synchronized")

        if loop is None or loop.is_closed():
            self._synced.set()
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._synced.set()
        else:
            loop.call_soon_threadsafe(self._synced.set)

    async def wait_synced(self, timeout: float | None = None) -> None:
        """Block until the readiness gate opens.

        Raises:
            CacheNotSyncedError: If ``timeout`` expires first.
        """
        with self._lock:
            if self._ready:
                return
            self._loop = asyncio.get_running_loop()
        await _wait_event(self._synced, timeout)


class NullCache:
    """Cache that stores nothing and is always ready."""

    def get(self, collection: str, resource_id: str) -> Metadata | None:  # noqa: ARG002
        return None

    def put(self, collection: str, resource_id: str, obj: Metadata) -> None:  # noqa: ARG002
        return None

    def delete(self, collection: str, resource_id: str) -> None:  # noqa: ARG002
        return None

    def list(self, collection: str) -> builtins.list[Metadata]:  # noqa: ARG002
        return []

    def replace(self, collection: str, objs: Iterable[Metadata]) -> None:  # noqa: ARG002
        return None

    @property
    def synced(self) -> bool:
        return True

    def mark_synced(self) -> None:
        return None

    async def wait_synced(self, timeout: float | None = None) -> None:  # noqa: ARG002
        return None
