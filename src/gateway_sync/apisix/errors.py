"""Exceptions for admin API operations."""

from __future__ import annotations

from gateway_sync.utils.errors import GatewaySyncError


class AdminAPIError(GatewaySyncError):
    """Base exception for admin API errors.

    Raised when there's a problem communicating with the admin API or
    processing its responses.
    """

    pass


class UnexpectedStatusError(AdminAPIError):
    """The admin API answered with a status the operation does not expect."""

    def __init__(self, method: str, url: str, status_code: int, body: str = "") -> None:
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        message = f"{method} {url} returned unexpected status {status_code}"
        if body:
            message = f"{message}: {body[:200]}"
        super().__init__(message)


class ProtocolDecodeError(AdminAPIError):
    """Malformed or unexpected admin API document."""

    pass


class TransportError(AdminAPIError):
    """Failed to reach the admin API (connection failure or timeout)."""

    pass


class CacheNotSyncedError(AdminAPIError):
    """The cache did not finish its initial synchronization in time."""

    pass
