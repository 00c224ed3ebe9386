"""Kubernetes access for ApisixRoute objects.

Only reads are needed here: a namespaced get, a list, and discovery of
which ApisixRoute versions the API server serves. Objects are returned as
plain dicts so the version-specific pydantic models can validate them.
"""

from __future__ import annotations

import builtins
import logging
from pathlib import Path
from typing import Any

from kubernetes import client, config
from kubernetes.client import ApiException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from kubernetes.dynamic.resource import Resource

from gateway_sync.config import AuthMode, GatewaySyncConfig, get_config
from gateway_sync.kube.crds import ApisixCRDs, CRDDefinition
from gateway_sync.kube.errors import UnsupportedVersionError
from gateway_sync.utils.errors import AuthenticationError, GatewaySyncError, NotFoundError

logger = logging.getLogger(__name__)

_SERVICE_ACCOUNT_TOKEN = Path("/var/run/secrets/kubernetes.io/serviceaccount/token")


def load_api_client(cfg: GatewaySyncConfig) -> client.ApiClient:
    """Build an API client for the configured auth mode.

    ``token`` uses the explicit server and bearer token. ``auto`` prefers
    the in-cluster service account. Otherwise the kubeconfig is used.
    """
    if cfg.auth_mode == AuthMode.TOKEN:
        if not cfg.api_server or not cfg.api_token:
            raise AuthenticationError(
                "api_server and api_token are required for token authentication"
            )
        configuration = client.Configuration()
        configuration.host = cfg.api_server
        configuration.api_key = {"authorization": f"Bearer {cfg.api_token}"}
        return client.ApiClient(configuration)

    if cfg.auth_mode == AuthMode.AUTO and _SERVICE_ACCOUNT_TOKEN.exists():
        configuration = client.Configuration()
        config.load_incluster_config(client_configuration=configuration)
        return client.ApiClient(configuration)

    kubeconfig_path = cfg.effective_kubeconfig_path
    if not kubeconfig_path.exists():
        raise AuthenticationError(f"Kubeconfig not found: {kubeconfig_path}")
    return config.new_client_from_config(
        config_file=str(kubeconfig_path),
        context=cfg.kubeconfig_context,
    )


class KubeClient:
    """Reads ApisixRoute objects through the dynamic client.

    Usage:
        with KubeClient(config) as kube:
            lister = new_dynamic_apisix_route_lister(kube)
            route = lister.preferred("default", "httpbin")
    """

    def __init__(self, config_obj: GatewaySyncConfig | None = None) -> None:
        self._config = config_obj or get_config()
        self._api_client: client.ApiClient | None = None
        self._dynamic_client: DynamicClient | None = None
        self._resources: dict[str, Resource] = {}

    @property
    def config(self) -> GatewaySyncConfig:
        """Configuration this client was built from."""
        return self._config

    @property
    def is_connected(self) -> bool:
        return self._dynamic_client is not None

    def connect(self) -> None:
        """Connect to the API server.

        Raises:
            AuthenticationError: If no usable credentials are found or the
                API server rejects them.
        """
        try:
            self._api_client = load_api_client(self._config)
            self._dynamic_client = DynamicClient(self._api_client)
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(f"Failed to connect to Kubernetes API: {e}") from e
        logger.info(f"Connected to Kubernetes API ({self._config.auth_mode.value} auth)")

    def close(self) -> None:
        if self._api_client is not None:
            self._api_client.close()
        self._api_client = None
        self._dynamic_client = None
        self._resources.clear()

    def __enter__(self) -> KubeClient:
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _resource(self, crd: CRDDefinition) -> Resource:
        if self._dynamic_client is None:
            raise GatewaySyncError("Client not connected. Call connect() first.")
        resource = self._resources.get(crd.api_version)
        if resource is None:
            resource = self._dynamic_client.resources.get(
                api_version=crd.api_version, kind=crd.kind
            )
            self._resources[crd.api_version] = resource
        return resource

    def served_route_versions(self) -> builtins.list[str]:
        """ApisixRoute group versions the API server serves, newest first."""
        served = []
        for crd in ApisixCRDs.APISIX_ROUTES:
            try:
                self._resource(crd)
            except ResourceNotFoundError:
                logger.debug(f"{crd.api_version} {crd.kind} is not served")
                continue
            served.append(crd.api_version)
        return served

    def preferred_route_version(self) -> str:
        """The configured ApisixRoute version, or the newest served one.

        Raises:
            UnsupportedVersionError: If no ApisixRoute version is served.
        """
        wanted = self._config.apisix_route_version.value
        served = self.served_route_versions()
        if wanted in served:
            return wanted
        if not served:
            raise UnsupportedVersionError("the API server serves no ApisixRoute version")
        logger.warning(f"{wanted} ApisixRoute is not served, using {served[0]}")
        return served[0]

    def get(self, crd: CRDDefinition, namespace: str, name: str) -> dict[str, Any]:
        """Fetch one object.

        Raises:
            NotFoundError: If the object does not exist.
            GatewaySyncError: On any other API error.
        """
        try:
            instance = self._resource(crd).get(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(crd.kind, name, namespace) from e
            raise GatewaySyncError(
                f"Failed to get {crd.api_version} {crd.kind} {namespace}/{name}: {e.reason}"
            ) from e
        return instance.to_dict()

    def list(
        self, crd: CRDDefinition, namespace: str | None = None
    ) -> builtins.list[dict[str, Any]]:
        """List objects, cluster-wide when ``namespace`` is None."""
        try:
            result = self._resource(crd).get(namespace=namespace)
        except ApiException as e:
            raise GatewaySyncError(
                f"Failed to list {crd.api_version} {crd.kind}: {e.reason}"
            ) from e
        return [item.to_dict() for item in result.items]
