"""Fixtures for ApisixRoute tests."""

from typing import Any

import pytest

from gateway_sync.kube.index import InMemoryApisixRouteIndex
from gateway_sync.kube.models import (
    ApisixRouteV2,
    ApisixRouteV2beta2,
    ApisixRouteV2beta3,
    ObjectMeta,
)


@pytest.fixture
def route_v2() -> ApisixRouteV2:
    return ApisixRouteV2(
        metadata=ObjectMeta(name="httpbin", namespace="default", resourceVersion="101")
    )


@pytest.fixture
def route_v2beta3() -> ApisixRouteV2beta3:
    return ApisixRouteV2beta3(
        metadata=ObjectMeta(name="httpbin", namespace="default", resourceVersion="102")
    )


@pytest.fixture
def route_v2beta2() -> ApisixRouteV2beta2:
    return ApisixRouteV2beta2(
        metadata=ObjectMeta(name="httpbin", namespace="default", resourceVersion="103")
    )


@pytest.fixture
def sample_v2beta3_dict() -> dict[str, Any]:
    """ApisixRoute as returned by the Kubernetes API."""
    return {
        "apiVersion": "apisix.apache.org/v2beta3",
        "kind": "ApisixRoute",
        "metadata": {
            "name": "httpbin-route",
            "namespace": "apps",
            "resourceVersion": "4711",
            "uid": "0b8f6c1e",
        },
        "spec": {
            "http": [
                {
                    "name": "rule1",
                    "match": {"hosts": ["httpbin.org"], "paths": ["/ip"]},
                    "backends": [{"serviceName": "httpbin", "servicePort": 80}],
                    "plugin_config_name": "echo-and-cors",
                }
            ]
        },
    }


@pytest.fixture
def indexes() -> dict[str, InMemoryApisixRouteIndex[Any]]:
    """Empty in-memory index per version."""
    return {
        "v2": InMemoryApisixRouteIndex(ApisixRouteV2),
        "v2beta3": InMemoryApisixRouteIndex(ApisixRouteV2beta3),
        "v2beta2": InMemoryApisixRouteIndex(ApisixRouteV2beta2),
    }
