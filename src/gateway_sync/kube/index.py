"""Version-specific read-only indexes of ApisixRoute objects.

Each index serves exactly one group version. The watch subsystem keeps
:class:`InMemoryApisixRouteIndex` up to date; :class:`DynamicApisixRouteIndex`
reads through to the Kubernetes API instead.
"""

from __future__ import annotations

import builtins
import logging
import threading
from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from gateway_sync.utils.errors import GatewaySyncError, NotFoundError

if TYPE_CHECKING:
    from gateway_sync.kube.client import KubeClient
    from gateway_sync.kube.crds import CRDDefinition

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
ModelT_co = TypeVar("ModelT_co", bound=BaseModel, covariant=True)


class ApisixRouteIndex(Protocol[ModelT_co]):
    """Lookup interface of one version-specific index.

    ``get`` raises :class:`NotFoundError` when the object is absent.
    """

    def get(self, namespace: str, name: str) -> ModelT_co: ...

    def list(self, namespace: str | None = None) -> builtins.list[ModelT_co]: ...


class InMemoryApisixRouteIndex(Generic[ModelT]):
    """Thread-safe store of one ApisixRoute version, keyed by namespace/name."""

    def __init__(self, model: type[ModelT]) -> None:
        self._model = model
        self._lock = threading.Lock()
        self._items: dict[tuple[str, str], ModelT] = {}

    @property
    def model(self) -> type[ModelT]:
        return self._model

    def _key(self, obj: ModelT) -> tuple[str, str]:
        if not isinstance(obj, self._model):
            raise TypeError(f"expected {self._model.__name__}, got {type(obj).__name__}")
        meta = obj.metadata  # type: ignore[attr-defined]
        return meta.namespace, meta.name

    def add(self, obj: ModelT) -> None:
        """Insert or replace an object."""
        key = self._key(obj)
        with self._lock:
            self._items[key] = obj.model_copy(deep=True)

    update = add

    def delete(self, obj: ModelT) -> None:
        """Remove an object; absent objects are ignored."""
        key = self._key(obj)
        with self._lock:
            self._items.pop(key, None)

    def get(self, namespace: str, name: str) -> ModelT:
        with self._lock:
            obj = self._items.get((namespace, name))
        if obj is None:
            raise NotFoundError("ApisixRoute", name, namespace)
        return obj.model_copy(deep=True)

    def list(self, namespace: str | None = None) -> builtins.list[ModelT]:
        with self._lock:
            items = sorted(self._items.items())
        return [
            obj.model_copy(deep=True)
            for (ns, _), obj in items
            if namespace is None or ns == namespace
        ]


class DynamicApisixRouteIndex(Generic[ModelT]):
    """Index that reads one CRD version through the Kubernetes dynamic client."""

    def __init__(self, kube: KubeClient, crd: CRDDefinition, model: type[ModelT]) -> None:
        self._kube = kube
        self._crd = crd
        self._model = model

    def _parse(self, data: dict[str, Any]) -> ModelT:
        try:
            return self._model.model_validate(data)
        except ValidationError as e:
            raise GatewaySyncError(
                f"invalid {self._crd.api_version} {self._crd.kind}: {e}"
            ) from e

    def get(self, namespace: str, name: str) -> ModelT:
        return self._parse(self._kube.get(self._crd, namespace, name))

    def list(self, namespace: str | None = None) -> builtins.list[ModelT]:
        objs = self._kube.list(self._crd, namespace=namespace)
        logger.debug(f"Listed {len(objs)} {self._crd.api_version} {self._crd.kind}")
        return [self._parse(data) for data in objs]
