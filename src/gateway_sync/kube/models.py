"""Pydantic models for the served versions of the ApisixRoute custom resource.

Field names follow the CRD schema (camelCase); Python attributes are
snake_case. Unknown fields are kept so objects round-trip unchanged.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _CRModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ObjectMeta(_CRModel):
    """Subset of Kubernetes object metadata."""

    name: str
    namespace: str = "default"
    resource_version: str = Field("", alias="resourceVersion")
    uid: str | None = None
    generation: int | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


class ApisixRouteHTTPBackend(_CRModel):
    """Kubernetes Service a rule proxies to."""

    service_name: str = Field(..., alias="serviceName")
    service_port: int | str = Field(..., alias="servicePort")
    resolve_granularity: str | None = Field(None, alias="resolveGranularity")
    weight: int | None = None
    subset: str | None = None


class ApisixRouteHTTPMatch(_CRModel):
    """Request matching conditions."""

    paths: list[str] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)
    hosts: list[str] = Field(default_factory=list)
    remote_addrs: list[str] = Field(default_factory=list, alias="remoteAddrs")
    exprs: list[dict[str, Any]] = Field(default_factory=list)


class ApisixRouteHTTPPlugin(_CRModel):
    """Plugin attached to a rule."""

    name: str
    enable: bool = False
    config: dict[str, Any] = Field(default_factory=dict)


class ApisixRouteStream(_CRModel):
    """TCP/UDP rule."""

    name: str
    protocol: str
    match: dict[str, Any] = Field(default_factory=dict)
    backend: ApisixRouteHTTPBackend


class ApisixRouteHTTPV2beta2(_CRModel):
    """HTTP rule in v2beta2; a rule may still use the single ``backend``."""

    name: str
    priority: int = 0
    match: ApisixRouteHTTPMatch | None = None
    backend: ApisixRouteHTTPBackend | None = None
    backends: list[ApisixRouteHTTPBackend] = Field(default_factory=list)
    websocket: bool = False
    plugins: list[ApisixRouteHTTPPlugin] = Field(default_factory=list)
    authentication: dict[str, Any] | None = None


class ApisixRouteHTTPV2beta3(_CRModel):
    """HTTP rule in v2beta3 and v2."""

    name: str
    priority: int = 0
    timeout: dict[str, str] | None = None
    match: ApisixRouteHTTPMatch | None = None
    backends: list[ApisixRouteHTTPBackend] = Field(default_factory=list)
    websocket: bool = False
    plugin_config_name: str | None = None
    plugins: list[ApisixRouteHTTPPlugin] = Field(default_factory=list)
    authentication: dict[str, Any] | None = None


class ApisixRouteSpecV2beta2(_CRModel):
    http: list[ApisixRouteHTTPV2beta2] = Field(default_factory=list)
    stream: list[ApisixRouteStream] = Field(default_factory=list)


class ApisixRouteSpecV2beta3(_CRModel):
    http: list[ApisixRouteHTTPV2beta3] = Field(default_factory=list)
    stream: list[ApisixRouteStream] = Field(default_factory=list)


class ApisixRouteSpecV2(_CRModel):
    ingress_class_name: str | None = Field(None, alias="ingressClassName")
    http: list[ApisixRouteHTTPV2beta3] = Field(default_factory=list)
    stream: list[ApisixRouteStream] = Field(default_factory=list)


class ApisixRouteV2beta2(_CRModel):
    """ApisixRoute in apisix.apache.org/v2beta2."""

    api_version: Literal["apisix.apache.org/v2beta2"] = Field(
        "apisix.apache.org/v2beta2", alias="apiVersion"
    )
    kind: Literal["ApisixRoute"] = "ApisixRoute"
    metadata: ObjectMeta
    spec: ApisixRouteSpecV2beta2 = Field(default_factory=ApisixRouteSpecV2beta2)
    status: dict[str, Any] | None = None


class ApisixRouteV2beta3(_CRModel):
    """ApisixRoute in apisix.apache.org/v2beta3."""

    api_version: Literal["apisix.apache.org/v2beta3"] = Field(
        "apisix.apache.org/v2beta3", alias="apiVersion"
    )
    kind: Literal["ApisixRoute"] = "ApisixRoute"
    metadata: ObjectMeta
    spec: ApisixRouteSpecV2beta3 = Field(default_factory=ApisixRouteSpecV2beta3)
    status: dict[str, Any] | None = None


class ApisixRouteV2(_CRModel):
    """ApisixRoute in apisix.apache.org/v2."""

    api_version: Literal["apisix.apache.org/v2"] = Field(
        "apisix.apache.org/v2", alias="apiVersion"
    )
    kind: Literal["ApisixRoute"] = "ApisixRoute"
    metadata: ObjectMeta
    spec: ApisixRouteSpecV2 = Field(default_factory=ApisixRouteSpecV2)
    status: dict[str, Any] | None = None
