"""Prometheus metrics collector."""

import logging
from typing import Optional

from prometheus_client import Counter, Gauge

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Collects and exposes Prometheus metrics for paced queues."""

    def __init__(self):
        """Initialize metrics."""

        # Dispatch counters
        self.batches_dispatched_total = Counter(
            "paced_queue_batches_dispatched_total",
            "Total batches handed to the processing callback",
            ["queue"],
        )

        self.items_dispatched_total = Counter(
            "paced_queue_items_dispatched_total",
            "Total items handed to the processing callback",
            ["queue"],
        )

        self.retries_total = Counter(
            "paced_queue_retries_total", "Total batches put back for retry", ["queue"]
        )

        self.completions_total = Counter(
            "paced_queue_completions_total", "Total times a queue drained", ["queue"]
        )

        self.items_cleared_total = Counter(
            "paced_queue_items_cleared_total", "Items discarded by clear()", ["queue"]
        )

        # Queue depth
        self.queue_size = Gauge("paced_queue_size", "Items waiting in the queue", ["queue"])

        self.recent_size = Gauge(
            "paced_queue_recent_size", "Items in the outstanding batch", ["queue"]
        )

        # Application health
        self.callback_errors_total = Counter(
            "paced_queue_callback_errors_total",
            "Exceptions raised by queue callbacks",
            ["queue", "callback"],
        )

    def record_batch(self, queue: str, items: int) -> None:
        """Record a dispatched batch."""
        self.batches_dispatched_total.labels(queue=queue).inc()
        self.items_dispatched_total.labels(queue=queue).inc(items)

    def record_retry(self, queue: str) -> None:
        """Record a retried batch."""
        self.retries_total.labels(queue=queue).inc()

    def record_completion(self, queue: str) -> None:
        """Record a drained queue."""
        self.completions_total.labels(queue=queue).inc()

    def record_cleared(self, queue: str, count: int) -> None:
        """Record items dropped by clear()."""
        if count:
            self.items_cleared_total.labels(queue=queue).inc(count)

    def update_sizes(self, queue: str, size: Optional[int] = None, recent: Optional[int] = None) -> None:
        """Update queue depth gauges."""
        if size is not None:
            self.queue_size.labels(queue=queue).set(size)
        if recent is not None:
            self.recent_size.labels(queue=queue).set(recent)

    def record_callback_error(self, queue: str, callback: str) -> None:
        """Record a callback failure."""
        self.callback_errors_total.labels(queue=queue, callback=callback).inc()


# Global metrics collector instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
