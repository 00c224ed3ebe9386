"""Exceptions for versioned custom resources."""

from __future__ import annotations

from gateway_sync.utils.errors import GatewaySyncError


class UnsupportedVersionError(GatewaySyncError):
    """The object is not one of the supported custom resource versions."""

    pass


class VersionMismatchError(GatewaySyncError):
    """A version accessor was used on an envelope holding another version."""

    def __init__(self, wanted: str, actual: str) -> None:
        self.wanted = wanted
        self.actual = actual
        super().__init__(f"not a {wanted} resource (holds {actual})")
