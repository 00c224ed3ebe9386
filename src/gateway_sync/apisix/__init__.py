"""APISIX admin API synchronization.

Exports:
    Models:
        - PluginConfig, Route, Upstream: admin API resources
        - Metadata: identifier/name block shared by all resources

    Clients:
        - Cluster: shared context bundling HTTP client, cache and metrics
        - AdminAPIClient: generic per-collection client
        - PluginConfigClient, RouteClient, UpstreamClient

    Cache:
        - ResourceCache: lock-guarded cache with readiness gate
        - NullCache: always-ready cache that stores nothing

    Errors:
        - AdminAPIError: base exception
        - UnexpectedStatusError, ProtocolDecodeError, TransportError,
          CacheNotSyncedError
"""

from gateway_sync.apisix.cache import Cache, NullCache, ResourceCache
from gateway_sync.apisix.client import (
    AdminAPIClient,
    PluginConfigClient,
    RouteClient,
    UpstreamClient,
)
from gateway_sync.apisix.cluster import Cluster
from gateway_sync.apisix.errors import (
    AdminAPIError,
    CacheNotSyncedError,
    ProtocolDecodeError,
    TransportError,
    UnexpectedStatusError,
)
from gateway_sync.apisix.models import (
    Metadata,
    PluginConfig,
    Route,
    Upstream,
    UpstreamNode,
)

__all__ = [
    # Models
    "Metadata",
    "PluginConfig",
    "Route",
    "Upstream",
    "UpstreamNode",
    # Clients
    "Cluster",
    "AdminAPIClient",
    "PluginConfigClient",
    "RouteClient",
    "UpstreamClient",
    # Cache
    "Cache",
    "ResourceCache",
    "NullCache",
    # Errors
    "AdminAPIError",
    "UnexpectedStatusError",
    "ProtocolDecodeError",
    "TransportError",
    "CacheNotSyncedError",
]
