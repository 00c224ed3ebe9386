"""Version-independent access to ApisixRoute objects.

ApisixRoute is served in several group versions whose schemas differ.
:class:`ApisixRoute` wraps exactly one of them and remembers which, so the
rest of the controller can pass routes around without caring about the
version until it needs version-specific fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from pydantic import BaseModel, ValidationError

from gateway_sync.kube.crds import APISIX_V2, APISIX_V2BETA2, APISIX_V2BETA3, ApisixCRDs
from gateway_sync.kube.errors import UnsupportedVersionError, VersionMismatchError
from gateway_sync.kube.index import ApisixRouteIndex, DynamicApisixRouteIndex
from gateway_sync.kube.models import ApisixRouteV2, ApisixRouteV2beta2, ApisixRouteV2beta3

if TYPE_CHECKING:
    from gateway_sync.kube.client import KubeClient

ApisixRouteObject = Union[ApisixRouteV2, ApisixRouteV2beta3, ApisixRouteV2beta2]

# Closed set of supported versions; every lookup goes through these two maps.
_MODELS: dict[str, type[BaseModel]] = {
    APISIX_V2: ApisixRouteV2,
    APISIX_V2BETA3: ApisixRouteV2beta3,
    APISIX_V2BETA2: ApisixRouteV2beta2,
}
_VERSIONS: dict[type[BaseModel], str] = {model: version for version, model in _MODELS.items()}


class ApisixRoute:
    """An ApisixRoute in one of the supported group versions.

    The envelope is a snapshot: it is built per lookup or per event and
    never modified afterwards.

    Two accessor families exist per version:

    - ``as_v2()`` and friends raise :class:`VersionMismatchError` when the
      envelope holds another version. Use these when the version is not
      known in advance.
    - ``v2()`` and friends raise ``AssertionError`` on mismatch. Use these
      only after checking :attr:`group_version`; a mismatch there is a bug.
    """

    __slots__ = ("_group_version", "_obj")

    def __init__(self, group_version: str, obj: ApisixRouteObject) -> None:
        model = _MODELS.get(group_version)
        if model is None:
            raise UnsupportedVersionError(f"unsupported ApisixRoute version: {group_version}")
        if type(obj) is not model:
            raise VersionMismatchError(group_version, _VERSIONS.get(type(obj), type(obj).__name__))
        self._group_version = group_version
        self._obj = obj

    @property
    def group_version(self) -> str:
        """Group version of the wrapped object."""
        return self._group_version

    @property
    def resource_version(self) -> str:
        """Change token assigned by the API server to the wrapped object."""
        return self._obj.metadata.resource_version

    @property
    def namespace(self) -> str:
        return self._obj.metadata.namespace

    @property
    def name(self) -> str:
        return self._obj.metadata.name

    @property
    def key(self) -> str:
        """``namespace/name`` key used by work queues."""
        return f"{self.namespace}/{self.name}"

    def _as(self, group_version: str) -> Any:
        if self._group_version != group_version:
            raise VersionMismatchError(group_version, self._group_version)
        return self._obj

    def _must(self, group_version: str) -> Any:
        if self._group_version != group_version:
            raise AssertionError(f"not a {group_version} route: holds {self._group_version}")
        return self._obj

    def as_v2(self) -> ApisixRouteV2:
        """Return the apisix.apache.org/v2 object.

        Raises:
            VersionMismatchError: If another version is wrapped.
        """
        return self._as(APISIX_V2)

    def as_v2beta3(self) -> ApisixRouteV2beta3:
        """Return the apisix.apache.org/v2beta3 object.

        Raises:
            VersionMismatchError: If another version is wrapped.
        """
        return self._as(APISIX_V2BETA3)

    def as_v2beta2(self) -> ApisixRouteV2beta2:
        """Return the apisix.apache.org/v2beta2 object.

        Raises:
            VersionMismatchError: If another version is wrapped.
        """
        return self._as(APISIX_V2BETA2)

    def v2(self) -> ApisixRouteV2:
        """Return the apisix.apache.org/v2 object; the caller has checked the version."""
        return self._must(APISIX_V2)

    def v2beta3(self) -> ApisixRouteV2beta3:
        """Return the apisix.apache.org/v2beta3 object; the caller has checked the version."""
        return self._must(APISIX_V2BETA3)

    def v2beta2(self) -> ApisixRouteV2beta2:
        """Return the apisix.apache.org/v2beta2 object; the caller has checked the version."""
        return self._must(APISIX_V2BETA2)

    def __repr__(self) -> str:
        return (
            f"ApisixRoute(group_version={self._group_version!r}, key={self.key!r}, "
            f"resource_version={self.resource_version!r})"
        )


@dataclass(frozen=True)
class ApisixRouteEvent:
    """Work item for an ApisixRoute change.

    ``old_object`` is set for updates and deletions so the reconciler can
    compare or clean up what was previously synced.
    """

    key: str
    group_version: str
    old_object: ApisixRoute | None = None


def new_apisix_route(obj: Any) -> ApisixRoute:
    """Wrap ``obj`` according to its version.

    Accepts the version models themselves, or a mapping / Kubernetes
    ``ResourceInstance`` carrying an ``apiVersion`` of a supported version.

    Raises:
        UnsupportedVersionError: If ``obj`` is not a supported ApisixRoute.
    """
    version = _VERSIONS.get(type(obj))
    if version is not None:
        return ApisixRoute(version, obj)

    data = obj.to_dict() if hasattr(obj, "to_dict") else obj
    if not isinstance(data, Mapping):
        raise UnsupportedVersionError(f"invalid ApisixRoute type: {type(obj).__name__}")

    version = data.get("apiVersion", "")
    model = _MODELS.get(version)
    if model is None or data.get("kind") != "ApisixRoute":
        raise UnsupportedVersionError(
            f"invalid ApisixRoute: apiVersion={version!r} kind={data.get('kind')!r}"
        )
    try:
        parsed = model.model_validate(data)
    except ValidationError as e:
        raise UnsupportedVersionError(f"invalid {version} ApisixRoute: {e}") from e
    return ApisixRoute(version, parsed)  # type: ignore[arg-type]


def must_new_apisix_route(obj: Any) -> ApisixRoute:
    """Like :func:`new_apisix_route` for callers that already validated ``obj``.

    An unsupported object is a programming error and raises ``AssertionError``.
    """
    try:
        return new_apisix_route(obj)
    except UnsupportedVersionError as e:
        raise AssertionError(str(e)) from e


class ApisixRouteLister:
    """Routes a namespace/name lookup to the index of the requested version.

    No caching happens here; the indexes are already fed by the watch
    subsystem. Index errors, including :class:`NotFoundError`, propagate
    unchanged.
    """

    def __init__(
        self,
        v2beta2: ApisixRouteIndex[ApisixRouteV2beta2],
        v2beta3: ApisixRouteIndex[ApisixRouteV2beta3],
        v2: ApisixRouteIndex[ApisixRouteV2],
        preferred_version: str = APISIX_V2,
    ) -> None:
        self._indexes: dict[str, ApisixRouteIndex[Any]] = {
            APISIX_V2BETA2: v2beta2,
            APISIX_V2BETA3: v2beta3,
            APISIX_V2: v2,
        }
        if preferred_version not in self._indexes:
            raise UnsupportedVersionError(f"unsupported ApisixRoute version: {preferred_version}")
        self._preferred_version = preferred_version

    def get(self, group_version: str, namespace: str, name: str) -> ApisixRoute:
        """Look up a route in the index of ``group_version``.

        Raises:
            UnsupportedVersionError: If ``group_version`` is not served.
            NotFoundError: If the index has no such route.
        """
        index = self._indexes.get(group_version)
        if index is None:
            raise UnsupportedVersionError(f"unsupported ApisixRoute version: {group_version}")
        return ApisixRoute(group_version, index.get(namespace, name))

    def v2beta2(self, namespace: str, name: str) -> ApisixRoute:
        """Get the ApisixRoute in apisix.apache.org/v2beta2."""
        return self.get(APISIX_V2BETA2, namespace, name)

    def v2beta3(self, namespace: str, name: str) -> ApisixRoute:
        """Get the ApisixRoute in apisix.apache.org/v2beta3."""
        return self.get(APISIX_V2BETA3, namespace, name)

    def v2(self, namespace: str, name: str) -> ApisixRoute:
        """Get the ApisixRoute in apisix.apache.org/v2."""
        return self.get(APISIX_V2, namespace, name)

    def preferred(self, namespace: str, name: str) -> ApisixRoute:
        """Get the ApisixRoute in the version the controller is configured to watch."""
        return self.get(self._preferred_version, namespace, name)

    def v2beta3_lister(self) -> ApisixRouteIndex[ApisixRouteV2beta3]:
        """The underlying v2beta3 index, for bulk operations."""
        return self._indexes[APISIX_V2BETA3]

    def v2_lister(self) -> ApisixRouteIndex[ApisixRouteV2]:
        """The underlying v2 index, for bulk operations."""
        return self._indexes[APISIX_V2]


def new_dynamic_apisix_route_lister(kube: KubeClient) -> ApisixRouteLister:
    """Build a lister whose indexes read through the Kubernetes API.

    The preferred version is the configured one when the API server serves
    it, otherwise the newest served version.
    """
    return ApisixRouteLister(
        v2beta2=DynamicApisixRouteIndex(kube, ApisixCRDs.APISIX_ROUTE_V2BETA2, ApisixRouteV2beta2),
        v2beta3=DynamicApisixRouteIndex(kube, ApisixCRDs.APISIX_ROUTE_V2BETA3, ApisixRouteV2beta3),
        v2=DynamicApisixRouteIndex(kube, ApisixCRDs.APISIX_ROUTE_V2, ApisixRouteV2),
        preferred_version=kube.preferred_route_version(),
    )
