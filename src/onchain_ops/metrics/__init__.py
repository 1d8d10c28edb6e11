"""Metrics — Prometheus metrics collection."""

from __future__ import annotations

from onchain_ops.metrics.collector import MetricsCollector, OperationMetrics

__all__ = ["MetricsCollector", "OperationMetrics"]
