"""Fixtures for admin API tests."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from gateway_sync.apisix.cache import ResourceCache
from gateway_sync.apisix.cluster import Cluster
from gateway_sync.metrics import InMemoryMetricsCollector

ADMIN_PREFIX = "/apisix/admin/"
BASE_URL = "http://apisix.test/apisix/admin"


class FakeAdminServer:
    """In-process admin API backed by a dict of store key -> raw value.

    Store keys look like ``/apisix/plugin_configs/1``, the same as the
    real gateway returns them.
    """

    def __init__(self) -> None:
        self.store: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []
        self._next_id = 1000

    def calls(self, method: str) -> int:
        return sum(1 for r in self.requests if r.method == method)

    def seed(self, collection: str, resource_id: str, value: dict[str, Any]) -> None:
        self.store[f"/apisix/{collection}/{resource_id}"] = json.dumps(value).encode()

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if not path.startswith(ADMIN_PREFIX):
            return httpx.Response(404)

        parts = path[len(ADMIN_PREFIX) :].strip("/").split("/")
        collection = parts[0]
        resource_id = parts[1] if len(parts) > 1 else None
        collection_key = f"/apisix/{collection}"

        if request.method == "GET" and resource_id is None:
            keys = sorted(k for k in self.store if k.startswith(collection_key + "/"))
            node: dict[str, Any] = {"key": collection_key}
            if keys:
                node["items"] = [
                    {"key": k, "value": json.loads(self.store[k])} for k in keys
                ]
            return httpx.Response(200, json={"count": str(len(keys)), "node": node})

        if request.method == "POST" and resource_id is None:
            self._next_id += 1
            return self._write(
                201, "create", f"{collection_key}/{self._next_id}", request.content
            )

        if resource_id is None:
            return httpx.Response(405)
        key = f"{collection_key}/{resource_id}"

        if request.method == "PUT":
            return self._write(201, "create", key, request.content)

        if request.method == "PATCH":
            if key not in self.store:
                return httpx.Response(404)
            return self._write(200, "compareAndSwap", key, request.content)

        if request.method == "DELETE":
            if key not in self.store:
                return httpx.Response(404)
            del self.store[key]
            return httpx.Response(200, json={"deleted": "1", "key": key})

        return httpx.Response(405)

    def _write(self, status: int, action: str, key: str, body: bytes) -> httpx.Response:
        self.store[key] = body
        return httpx.Response(
            status,
            json={"action": action, "node": {"key": key, "value": json.loads(body)}},
        )


@pytest.fixture
def fake_server() -> FakeAdminServer:
    """Create an empty fake admin API."""
    return FakeAdminServer()


@pytest.fixture
def metrics() -> InMemoryMetricsCollector:
    return InMemoryMetricsCollector()


@pytest.fixture
def cache() -> ResourceCache:
    return ResourceCache()


@pytest.fixture
def cluster(
    fake_server: FakeAdminServer,
    cache: ResourceCache,
    metrics: InMemoryMetricsCollector,
) -> Cluster:
    """Create a cluster talking to the fake admin API."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_server.handle))
    return Cluster(BASE_URL, http_client=http_client, cache=cache, metrics=metrics)


@pytest.fixture
def failing_cluster(cache: ResourceCache, metrics: InMemoryMetricsCollector) -> Any:
    """Create a cluster whose every request is answered by ``handler``."""

    def _create(handler: Any) -> Cluster:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Cluster(BASE_URL, http_client=http_client, cache=cache, metrics=metrics)

    return _create
