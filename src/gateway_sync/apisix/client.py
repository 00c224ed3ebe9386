"""Admin API clients, one per resource collection."""

from __future__ import annotations

import builtins
import logging
import time
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import httpx

from gateway_sync.apisix import codec
from gateway_sync.apisix.errors import TransportError, UnexpectedStatusError
from gateway_sync.apisix.models import Metadata, PluginConfig, Route, Upstream
from gateway_sync.utils.errors import NotFoundError

if TYPE_CHECKING:
    from gateway_sync.apisix.cluster import Cluster

logger = logging.getLogger(__name__)

ResourceT = TypeVar("ResourceT", bound=Metadata)


class AdminAPIClient(Generic[ResourceT]):
    """Create/list/update/delete one collection of the admin API.

    Writes go to the gateway and, once the gateway confirms them, to the
    shared cache. Reads are served from the cache after the initial
    synchronization.

    Operations on the same identifier are not serialized here. Update and
    delete racing on one identifier resolve in whatever order the gateway
    receives them; the admin protocol offers no per-object lock and the
    compareAndSwap action is applied unconditionally.

    Subclasses only declare ``collection``, ``kind`` and ``model``.
    """

    collection: str
    kind: str
    model: type[ResourceT]

    def __init__(self, cluster: Cluster) -> None:
        self._cluster = cluster

    @property
    def url(self) -> str:
        """URL of the collection."""
        return f"{self._cluster.base_url}/{self.collection}"

    def _item_url(self, resource_id: str) -> str:
        return f"{self.url}/{resource_id}"

    def _require_id(self, obj: ResourceT) -> str:
        if not obj.id:
            raise ValueError(f"{self.kind} has no identifier")
        return obj.id

    async def _request(
        self,
        method: str,
        url: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Perform one HTTP round trip and record its outcome.

        Raises:
            TransportError: If the gateway could not be reached in time.
        """
        metrics = self._cluster.metrics
        start_time = time.perf_counter()
        status_code = 0
        try:
            response = await self._cluster.http_client.request(method, url, json=json)
            status_code = response.status_code
            return response
        except httpx.TimeoutException as e:
            raise TransportError(f"Timeout calling {method} {url}: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"Failed to call {method} {url}: {e}") from e
        finally:
            metrics.record_latency(self.kind, method, time.perf_counter() - start_time)
            metrics.record_status(self.kind, method, status_code)
            logger.debug(f"{method} {url} -> {status_code or 'no response'}")

    @staticmethod
    def _check_status(response: httpx.Response) -> None:
        if not response.is_success:
            raise UnexpectedStatusError(
                response.request.method,
                str(response.request.url),
                response.status_code,
                response.text,
            )

    async def create(self, obj: ResourceT) -> ResourceT:
        """Create an object on the gateway.

        Objects without an identifier are POSTed to the collection and the
        gateway assigns one. The returned object always carries the
        identifier from the response key.

        Raises:
            UnexpectedStatusError: On any non-2xx status.
            ProtocolDecodeError: If the response cannot be decoded.
            TransportError: If the gateway is unreachable.
        """
        body = codec.encode(obj)
        if obj.id:
            response = await self._request("PUT", self._item_url(obj.id), json=body)
        else:
            response = await self._request("POST", self.url, json=body)
        self._check_status(response)

        created = codec.decode_write(response.content, self.model)
        self._cluster.cache.put(self.collection, created.id, created)
        logger.debug(f"Created {self.kind} {created.id}")
        return created

    async def list(self, timeout: float | None = None) -> builtins.list[ResourceT]:
        """List the collection from the cache, ordered by identifier.

        Waits for the initial cache synchronization first; no remote call
        is made.

        Args:
            timeout: Seconds to wait for the cache; None waits indefinitely.

        Raises:
            CacheNotSyncedError: If the cache is still not synced after ``timeout``.
        """
        await self._cluster.cache.wait_synced(timeout)
        return self._cluster.cache.list(self.collection)  # type: ignore[return-value]

    async def list_remote(self) -> builtins.list[ResourceT]:
        """Fetch the whole collection from the gateway, ordered by store key.

        Used to populate the cache; regular reads should use :meth:`list`.

        Raises:
            UnexpectedStatusError: On any non-2xx status.
            ProtocolDecodeError: If the response or any item cannot be decoded.
            TransportError: If the gateway is unreachable.
        """
        response = await self._request("GET", self.url)
        self._check_status(response)
        return codec.decode_list(response.content, self.model)

    async def update(self, obj: ResourceT) -> ResourceT:
        """Replace an existing object on the gateway.

        Raises:
            NotFoundError: If the gateway has no object with this identifier.
            ValueError: If ``obj`` has no identifier.
            UnexpectedStatusError: On any other non-2xx status.
            ProtocolDecodeError: If the response cannot be decoded.
            TransportError: If the gateway is unreachable.
        """
        resource_id = self._require_id(obj)
        response = await self._request(
            "PATCH", self._item_url(resource_id), json=codec.encode(obj)
        )
        if response.status_code == 404:
            raise NotFoundError(self.kind, resource_id)
        self._check_status(response)

        updated = codec.decode_write(response.content, self.model)
        self._cluster.cache.put(self.collection, updated.id, updated)
        logger.debug(f"Updated {self.kind} {updated.id}")
        return updated

    async def delete(self, obj: ResourceT) -> None:
        """Delete an object from the gateway.

        The cache entry is dropped only after the gateway confirms. A 404 is
        reported to the caller, who decides whether an absent object counts
        as deleted.

        Raises:
            NotFoundError: If the gateway has no object with this identifier.
            ValueError: If ``obj`` has no identifier.
            UnexpectedStatusError: On any other non-2xx status.
            TransportError: If the gateway is unreachable.
        """
        resource_id = self._require_id(obj)
        response = await self._request("DELETE", self._item_url(resource_id))
        if response.status_code == 404:
            raise NotFoundError(self.kind, resource_id)
        self._check_status(response)

        self._cluster.cache.delete(self.collection, resource_id)
        logger.debug(f"Deleted {self.kind} {resource_id}")


class PluginConfigClient(AdminAPIClient[PluginConfig]):
    """Client for ``/plugin_configs``."""

    collection = "plugin_configs"
    kind = "PluginConfig"
    model = PluginConfig


class RouteClient(AdminAPIClient[Route]):
    """Client for ``/routes``."""

    collection = "routes"
    kind = "Route"
    model = Route


class UpstreamClient(AdminAPIClient[Upstream]):
    """Client for ``/upstreams``."""

    collection = "upstreams"
    kind = "Upstream"
    model = Upstream
