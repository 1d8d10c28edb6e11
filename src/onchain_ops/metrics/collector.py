"""Metrics collector — Prometheus counters and histograms.

Lifecycle engine metrics:
- ``onchain_ops_status_resolutions_total`` counter-vec (state)
- ``onchain_ops_receipt_missing_total``
- ``onchain_ops_wait_timeouts_total``
- ``onchain_ops_data_source_query_histogram`` (method)
- ``onchain_ops_wait_histogram``
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator

_PREFIX = "onchain_ops"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`OperationMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class OperationMetrics:
    """High-level metrics for status resolution and waits."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._resolutions = self._collector.counter(
            f"{_PREFIX}_status_resolutions",
            "Lifecycle states returned by the status resolver",
            ("state",),
        )
        self._receipt_missing = self._collector.counter(
            f"{_PREFIX}_receipt_missing",
            "Mined transactions whose receipt was not yet available",
        )
        self._wait_timeouts = self._collector.counter(
            f"{_PREFIX}_wait_timeouts",
            "Waits that hit their deadline without a terminal state",
        )
        self._query = self._collector.histogram(
            f"{_PREFIX}_data_source_query_histogram",
            "Duration of blockchain data source queries",
            ("method",),
        )
        self._wait = self._collector.histogram(
            f"{_PREFIX}_wait_histogram",
            "Duration of waits for a terminal state",
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    # -- Counters --

    def record_resolution(self, state: str) -> None:
        """Count one resolved lifecycle state."""
        self._resolutions.labels(state=state).inc()

    def record_receipt_missing(self) -> None:
        self._receipt_missing.inc()

    def record_wait_timeout(self) -> None:
        self._wait_timeouts.inc()

    # -- Duration trackers (context managers) --

    @contextmanager
    def track_data_source_query(self, method: str) -> Iterator[None]:
        """Track the duration of one data source query."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._query.labels(method=method).observe(time.monotonic() - start)

    @contextmanager
    def track_wait(self) -> Iterator[None]:
        """Track the duration of a wait for a terminal state."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._wait.observe(time.monotonic() - start)
