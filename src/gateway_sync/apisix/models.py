"""Pydantic models for admin API resources and wire documents."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Metadata(BaseModel):
    """Metadata block shared by every admin API resource.

    Unknown fields returned by the gateway are preserved so that a
    decode/encode cycle does not drop them.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field("", description="Resource identifier")
    name: str = Field("", description="Human readable name")
    desc: str | None = Field(None, description="Description")
    labels: dict[str, str] | None = Field(None, description="Labels for filtering")


class PluginConfig(Metadata):
    """Reusable group of plugin settings referenced by routes."""

    plugins: dict[str, Any] = Field(default_factory=dict, description="Plugin name to config")


class Route(Metadata):
    """Gateway route."""

    uri: str | None = Field(None, description="Single request path")
    uris: list[str] | None = Field(None, description="Request paths")
    hosts: list[str] | None = Field(None, description="Host names")
    methods: list[str] | None = Field(None, description="HTTP methods")
    priority: int | None = Field(None, description="Match priority")
    plugins: dict[str, Any] | None = Field(None, description="Plugin name to config")
    upstream_id: str | None = Field(None, description="Referenced upstream")
    plugin_config_id: str | None = Field(None, description="Referenced plugin config")
    enable_websocket: bool | None = Field(None, description="Proxy websocket upgrades")


class UpstreamNode(BaseModel):
    """Backend endpoint of an upstream."""

    host: str
    port: int
    weight: int = 100


class Upstream(Metadata):
    """Load-balanced group of backend nodes."""

    type: str = Field("roundrobin", description="Load balancing algorithm")
    nodes: list[UpstreamNode] = Field(default_factory=list, description="Backend nodes")
    scheme: str | None = Field(None, description="Protocol used towards the nodes")
    retries: int | None = Field(None, description="Retry count")
    timeout: dict[str, float] | None = Field(None, description="connect/send/read timeouts")


class Item(BaseModel):
    """A stored key with its raw value document."""

    key: str
    value: Any = None


class ListNode(BaseModel):
    """Directory node of a list response."""

    key: str = ""
    items: list[Item] = Field(default_factory=list)


class ListResponse(BaseModel):
    """Body of ``GET {collection}``."""

    count: int = 0
    node: ListNode


class WriteResponse(BaseModel):
    """Body of create (PUT/POST) and compareAndSwap (PATCH) responses."""

    action: str
    node: Item
