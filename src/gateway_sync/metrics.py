"""Metrics sinks for admin API call outcomes.

The cluster records one status and one latency observation for every
remote call, and one observation per cache synchronization attempt.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import Protocol


class MetricsCollector(Protocol):
    """Sink accepting admin API call-outcome observations."""

    def record_status(self, kind: str, method: str, status_code: int) -> None:
        """Record the HTTP status of a call (0 when the transport failed)."""
        ...

    def record_latency(self, kind: str, method: str, seconds: float) -> None:
        """Record how long a call took."""
        ...

    def record_cache_sync(self, success: bool) -> None:
        """Record the outcome of a full cache synchronization."""
        ...


class NullMetricsCollector:
    """Collector that drops every observation."""

    def record_status(self, kind: str, method: str, status_code: int) -> None:  # noqa: ARG002
        return None

    def record_latency(self, kind: str, method: str, seconds: float) -> None:  # noqa: ARG002
        return None

    def record_cache_sync(self, success: bool) -> None:  # noqa: ARG002
        return None


class InMemoryMetricsCollector:
    """Thread-safe in-process counters.

    Status codes are counted per (kind, method, status_code). Latencies are
    kept as raw samples per (kind, method).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._status: dict[tuple[str, str, int], int] = defaultdict(int)
        self._latency: dict[tuple[str, str], list[float]] = defaultdict(list)
        self._cache_syncs: dict[bool, int] = defaultdict(int)

    def record_status(self, kind: str, method: str, status_code: int) -> None:
        with self._lock:
            self._status[(kind, method, status_code)] += 1

    def record_latency(self, kind: str, method: str, seconds: float) -> None:
        with self._lock:
            self._latency[(kind, method)].append(seconds)

    def record_cache_sync(self, success: bool) -> None:
        with self._lock:
            self._cache_syncs[success] += 1

    def status_count(self, kind: str, method: str, status_code: int) -> int:
        """Number of calls that ended with the given status."""
        with self._lock:
            return self._status.get((kind, method, status_code), 0)

    def latencies(self, kind: str, method: str) -> list[float]:
        """Copy of the latency samples for a kind and method."""
        with self._lock:
            return list(self._latency.get((kind, method), []))

    def cache_sync_count(self, success: bool) -> int:
        """Number of cache synchronizations with the given outcome."""
        with self._lock:
            return self._cache_syncs.get(success, 0)

    def summary(self) -> dict[str, int]:
        """Flatten status counters into "kind method status" keys."""
        with self._lock:
            return {
                f"{kind} {method} {status}": count
                for (kind, method, status), count in sorted(self._status.items())
            }
