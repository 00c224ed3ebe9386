"""Core exceptions shared across gateway-sync packages."""

from __future__ import annotations


class GatewaySyncError(Exception):
    """Base exception for all gateway-sync errors."""

    pass


class NotFoundError(GatewaySyncError):
    """A resource does not exist.

    Raised for admin API 404 responses on update/delete and for misses in
    the version-specific custom resource indexes.
    """

    def __init__(self, kind: str, name: str, namespace: str | None = None) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        if namespace:
            message = f"{kind} '{namespace}/{name}' not found"
        else:
            message = f"{kind} '{name}' not found"
        super().__init__(message)


class AuthenticationError(GatewaySyncError):
    """Failed to authenticate with the Kubernetes API."""

    pass
