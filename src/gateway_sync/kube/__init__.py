"""Kubernetes side: versioned ApisixRoute access.

Exports:
    Envelope:
        - ApisixRoute: one ApisixRoute in any supported version
        - ApisixRouteEvent: work item for ApisixRoute changes
        - new_apisix_route / must_new_apisix_route: version-dispatching factories

    Lister:
        - ApisixRouteLister: façade over the version-specific indexes
        - InMemoryApisixRouteIndex, DynamicApisixRouteIndex: index implementations

    Kubernetes:
        - KubeClient: dynamic-client reads and ApisixRoute version discovery

    Errors:
        - UnsupportedVersionError, VersionMismatchError
"""

from gateway_sync.kube.apisix_route import (
    ApisixRoute,
    ApisixRouteEvent,
    ApisixRouteLister,
    must_new_apisix_route,
    new_apisix_route,
    new_dynamic_apisix_route_lister,
)
from gateway_sync.kube.client import KubeClient
from gateway_sync.kube.crds import APISIX_V2, APISIX_V2BETA2, APISIX_V2BETA3, ApisixCRDs
from gateway_sync.kube.errors import UnsupportedVersionError, VersionMismatchError
from gateway_sync.kube.index import (
    ApisixRouteIndex,
    DynamicApisixRouteIndex,
    InMemoryApisixRouteIndex,
)

__all__ = [
    # Versions
    "APISIX_V2",
    "APISIX_V2BETA3",
    "APISIX_V2BETA2",
    "ApisixCRDs",
    # Envelope
    "ApisixRoute",
    "ApisixRouteEvent",
    "new_apisix_route",
    "must_new_apisix_route",
    # Lister
    "ApisixRouteLister",
    "new_dynamic_apisix_route_lister",
    "ApisixRouteIndex",
    "InMemoryApisixRouteIndex",
    "DynamicApisixRouteIndex",
    # Kubernetes
    "KubeClient",
    # Errors
    "UnsupportedVersionError",
    "VersionMismatchError",
]
