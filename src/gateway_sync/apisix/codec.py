"""Conversion between domain models and admin API wire documents.

Responses are decoded in two passes: the envelope (list or write response)
first, then each item's embedded ``value`` document into the resource model.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

from pydantic import ValidationError

from gateway_sync.apisix.errors import ProtocolDecodeError
from gateway_sync.apisix.models import Item, ListResponse, Metadata, WriteResponse

ResourceT = TypeVar("ResourceT", bound=Metadata)


def encode(obj: Metadata) -> dict[str, Any]:
    """Encode a domain object into its wire value document.

    An empty identifier is left out so the gateway can assign one.
    """
    doc = obj.model_dump(mode="json", exclude_none=True)
    if not doc.get("id"):
        doc.pop("id", None)
    return doc


def id_from_key(key: str, collection_key: str | None = None) -> str:
    """Extract the resource identifier from a store key.

    Keys look like ``/apisix/plugin_configs/1``; the last path segment is
    the identifier. When ``collection_key`` is given the key must lie
    below it.

    Raises:
        ProtocolDecodeError: If the key has no identifier segment or is
            outside ``collection_key``.
    """
    path = key
    if collection_key:
        prefix = collection_key.rstrip("/") + "/"
        if not key.startswith(prefix):
            raise ProtocolDecodeError(f"store key {key!r} is outside {collection_key!r}")
        path = key[len(prefix) :]
    resource_id = path.rstrip("/").rsplit("/", 1)[-1] if path else ""
    if not resource_id:
        raise ProtocolDecodeError(f"store key has no identifier: {key!r}")
    return resource_id


def _parse_body(body: bytes | str) -> Any:
    try:
        return json.loads(body)
    except (ValueError, TypeError) as e:
        raise ProtocolDecodeError(f"response body is not valid JSON: {e}") from e


def decode_item(
    item: Item, model: type[ResourceT], collection_key: str | None = None
) -> ResourceT:
    """Decode one stored item into a domain object.

    The identifier always comes from the item key, not from the value
    document, so gateway-assigned identifiers are honoured.

    Raises:
        ProtocolDecodeError: If the value is missing or does not match the model.
    """
    resource_id = id_from_key(item.key, collection_key)
    value = item.value
    if isinstance(value, (str, bytes)):
        value = _parse_body(value)
    if not isinstance(value, dict):
        raise ProtocolDecodeError(
            f"value of {item.key!r} is not an object: {type(value).__name__}"
        )

    try:
        obj = model.model_validate(value)
    except ValidationError as e:
        raise ProtocolDecodeError(
            f"value of {item.key!r} is not a valid {model.__name__}: {e}"
        ) from e
    obj.id = resource_id
    return obj


def decode_list(body: bytes | str, model: type[ResourceT]) -> list[ResourceT]:
    """Decode a list response, returning objects sorted by store key.

    Raises:
        ProtocolDecodeError: On malformed envelope or any malformed item.
    """
    try:
        resp = ListResponse.model_validate(_parse_body(body))
    except ValidationError as e:
        raise ProtocolDecodeError(f"malformed list response: {e}") from e

    items = sorted(resp.node.items, key=lambda item: item.key)
    return [decode_item(item, model, resp.node.key) for item in items]


def decode_write(body: bytes | str, model: type[ResourceT]) -> ResourceT:
    """Decode a create or compareAndSwap response into the persisted object.

    Raises:
        ProtocolDecodeError: On malformed envelope or value.
    """
    try:
        resp = WriteResponse.model_validate(_parse_body(body))
    except ValidationError as e:
        raise ProtocolDecodeError(f"malformed write response: {e}") from e

    return decode_item(resp.node, model)
