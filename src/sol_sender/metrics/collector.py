"""Metrics collector — Prometheus counters and histograms for the sender.

- ``sol_sender_resend_total`` counter
- ``sol_sender_resend_failures_total`` counter
- ``sol_sender_confirmations_total`` counter-vec (push, poll)
- ``sol_sender_outcomes_total`` counter-vec (confirmed, not_found, expired, cancelled, error)
- ``sol_sender_confirmation_seconds`` histogram
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator


_PREFIX = "sol_sender"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`SenderMetrics` for the high-level tracking interface.
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


class SenderMetrics:
    """High-level metrics for send-and-confirm operations."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._resends = self._collector.counter(
            f"{_PREFIX}_resend",
            "Transaction resend attempts",
        )
        self._resend_failures = self._collector.counter(
            f"{_PREFIX}_resend_failures",
            "Transaction resend attempts that raised",
        )
        self._confirmations = self._collector.counter(
            f"{_PREFIX}_confirmations",
            "Confirmations observed, by winning strategy",
            ("via",),
        )
        self._outcomes = self._collector.counter(
            f"{_PREFIX}_outcomes",
            "Final send-and-confirm outcomes",
            ("outcome",),
        )
        self._confirmation_seconds = self._collector.histogram(
            f"{_PREFIX}_confirmation_seconds",
            "Time from submission until the confirmation race finished",
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    def record_resend(self, *, failed: bool = False) -> None:
        """Count one resend attempt."""
        self._resends.inc()
        if failed:
            self._resend_failures.inc()

    def record_confirmation(self, via: str) -> None:
        """Count a confirmation won by strategy *via*."""
        self._confirmations.labels(via=via).inc()

    def record_outcome(self, outcome: str) -> None:
        """Count a final outcome."""
        self._outcomes.labels(outcome=outcome).inc()

    @contextmanager
    def track_confirmation(self) -> Iterator[None]:
        """Track the duration of the confirmation race."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._confirmation_seconds.observe(time.monotonic() - start)
