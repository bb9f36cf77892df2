"""Metrics — Prometheus metrics collection."""

from __future__ import annotations

from sol_sender.metrics.collector import MetricsCollector, SenderMetrics

__all__ = ["MetricsCollector", "SenderMetrics"]
