"""
Metrics Collection
Prometheus metrics for wire codec and session consistency tracking
"""

import time
from contextlib import contextmanager
from typing import Callable, Iterator

from prometheus_client import Counter, Gauge, Histogram


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the synchronization core.
    """

    def __init__(self) -> None:
        # Codec metrics
        self.documents_total = Counter(
            "uisync_documents_total",
            "Total number of wire documents processed",
            ["direction", "status"],
        )
        self.decode_duration = Histogram(
            "uisync_decode_duration_seconds",
            "Wire document decode duration in seconds",
            ["kind"],
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
        )
        self.decode_errors_total = Counter(
            "uisync_decode_errors_total",
            "Total number of fatal decode errors",
            ["error_type"],
        )
        self.properties_skipped_total = Counter(
            "uisync_properties_skipped_total",
            "Properties omitted from encoded output",
            ["reason"],
        )

        # Transaction gate metrics
        self.client_batches_total = Counter(
            "uisync_client_batches_total",
            "Client update batches by gate outcome",
            ["outcome"],
        )

        # Session metrics
        self.active_sessions = Gauge(
            "uisync_active_sessions",
            "Number of initialized, undisposed sessions",
        )

        # System metrics
        self.uptime = Gauge(
            "uisync_uptime_seconds",
            "Process uptime in seconds",
        )
        self.start_time = time.time()
        self.uptime.set_function(lambda: time.time() - self.start_time)

    def record_document(self, direction: str, status: str) -> None:
        """Record an encoded or decoded document."""
        self.documents_total.labels(direction=direction, status=status).inc()

    def record_decode_error(self, error_type: str) -> None:
        """Record a fatal decode error."""
        self.decode_errors_total.labels(error_type=error_type).inc()

    def record_skipped_property(self, reason: str) -> None:
        """Record a property omitted on encode."""
        self.properties_skipped_total.labels(reason=reason).inc()

    def record_client_batch(self, outcome: str) -> None:
        """Record a client batch outcome (accepted, stale, rejected)."""
        self.client_batches_total.labels(outcome=outcome).inc()

    def session_started(self) -> None:
        self.active_sessions.inc()

    def session_ended(self) -> None:
        self.active_sessions.dec()

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]) -> Iterator[None]:
        """Context manager to measure operation duration."""
        start = time.time()
        try:
            yield
        finally:
            duration = time.time() - start
            callback(duration)

    def observe_decode(self, kind: str) -> Callable[[float], None]:
        """Callback for measure_duration that feeds the decode histogram."""
        return self.decode_duration.labels(kind=kind).observe


# Global metrics collector instance
metrics_collector = MetricsCollector()
