"""Shared context for every admin API client of one gateway."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from gateway_sync.apisix.cache import Cache, ResourceCache
from gateway_sync.apisix.client import (
    AdminAPIClient,
    PluginConfigClient,
    RouteClient,
    UpstreamClient,
)
from gateway_sync.apisix.errors import CacheNotSyncedError
from gateway_sync.metrics import MetricsCollector, NullMetricsCollector

if TYPE_CHECKING:
    from gateway_sync.config import GatewaySyncConfig

logger = logging.getLogger(__name__)


def build_http_client(config: GatewaySyncConfig) -> httpx.AsyncClient:
    """Create the HTTP client used to talk to the admin API."""
    headers: dict[str, str] = {}
    if config.admin_key:
        headers["X-API-KEY"] = config.admin_key

    return httpx.AsyncClient(
        timeout=config.admin_timeout,
        headers=headers,
        verify=not config.admin_skip_tls_verify,
    )


class Cluster:
    """One gateway: base URL, HTTP client, cache and metrics sink.

    The cluster is not reconfigured after construction. Its per-collection
    clients share the same cache, and only those clients write to it.

    Usage:
        async with Cluster("http://127.0.0.1:9180/apisix/admin") as cluster:
            await cluster.sync_cache()
            configs = await cluster.plugin_config.list()
    """

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
        cache: Cache | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient()
        self._cache: Cache = cache if cache is not None else ResourceCache()
        self._metrics: MetricsCollector = metrics or NullMetricsCollector()

        self._plugin_config = PluginConfigClient(self)
        self._route = RouteClient(self)
        self._upstream = UpstreamClient(self)

    @classmethod
    def from_config(
        cls,
        config: GatewaySyncConfig,
        cache: Cache | None = None,
        metrics: MetricsCollector | None = None,
    ) -> Cluster:
        """Build a cluster whose HTTP client follows the configuration."""
        cluster = cls(
            config.admin_base_url,
            http_client=build_http_client(config),
            cache=cache,
            metrics=metrics,
        )
        cluster._owns_http_client = True
        return cluster

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http_client

    @property
    def cache(self) -> Cache:
        return self._cache

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics

    @property
    def plugin_config(self) -> PluginConfigClient:
        return self._plugin_config

    @property
    def route(self) -> RouteClient:
        return self._route

    @property
    def upstream(self) -> UpstreamClient:
        return self._upstream

    @property
    def clients(self) -> list[AdminAPIClient[Any]]:
        """Every per-collection client, in synchronization order."""
        return [self._plugin_config, self._upstream, self._route]

    async def sync_cache(self, timeout: float | None = None) -> dict[str, int]:
        """Load every collection from the gateway into the cache.

        The readiness gate opens only after all collections were loaded.
        On failure the gate stays closed and the error propagates.

        Args:
            timeout: Overall deadline in seconds; None means no deadline.

        Returns:
            Number of objects loaded per collection.

        Raises:
            CacheNotSyncedError: If ``timeout`` expires.
            AdminAPIError: If any collection cannot be listed.
        """

        async def _load() -> dict[str, int]:
            counts: dict[str, int] = {}
            for client in self.clients:
                objs = await client.list_remote()
                self._cache.replace(client.collection, objs)
                counts[client.collection] = len(objs)
            return counts

        try:
            counts = await asyncio.wait_for(_load(), timeout)
        except asyncio.TimeoutError as e:
            self._metrics.record_cache_sync(False)
            raise CacheNotSyncedError(f"cache sync did not finish within {timeout}s") from e
        except Exception:
            self._metrics.record_cache_sync(False)
            raise

        self._cache.mark_synced()
        self._metrics.record_cache_sync(True)
        logger.info(f"Synced cache from {self._base_url}: {counts}")
        return counts

    async def wait_synced(self, timeout: float | None = None) -> None:
        """Block until the cache readiness gate opens.

        Raises:
            CacheNotSyncedError: If ``timeout`` expires first.
        """
        await self._cache.wait_synced(timeout)

    @property
    def has_synced(self) -> bool:
        return self._cache.synced

    async def close(self) -> None:
        """Close the HTTP client if the cluster created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> Cluster:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
