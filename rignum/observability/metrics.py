"""
Prometheus metrics for monitoring the feed API.

Defines and exposes metrics for:
- Feed request outcomes
- Feed query latency
- Page sizes returned
- Filter usage
- Storage errors
- Request timeouts

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    start_http_server,
)

from rignum.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)

# Page sizes are capped at 100 items
PAGE_SIZE_BUCKETS = (0, 1, 5, 10, 25, 50, 75, 100)


class MetricsCollector:
    """
    Prometheus metrics collector for the feed API.

    Usage:
        metrics = MetricsCollector()
        metrics.start_server()

        metrics.record_feed_query(status="success", latency=0.012, count=50)
        metrics.record_filters(["source", "topic"])
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """Initialize Prometheus metrics on the given (or global) registry."""
        self._registry = registry or REGISTRY

        self.feed_requests = Counter(
            "rignum_feed_requests_total",
            "Total feed queries served",
            ["status"],  # success, error
            registry=self._registry,
        )

        self.feed_query_latency = Histogram(
            "rignum_feed_query_latency_seconds",
            "Time to build, execute and map a feed query",
            buckets=LATENCY_BUCKETS,
            registry=self._registry,
        )

        self.feed_items_returned = Histogram(
            "rignum_feed_items_returned",
            "Number of items returned per feed query",
            buckets=PAGE_SIZE_BUCKETS,
            registry=self._registry,
        )

        self.feed_filters_used = Counter(
            "rignum_feed_filters_used_total",
            "Optional feed filters supplied by callers",
            ["filter"],  # q, source, market, label, flag, topic
            registry=self._registry,
        )

        self.storage_errors = Counter(
            "rignum_storage_errors_total",
            "Total storage failures surfaced to callers",
            ["operation", "error_type"],
            registry=self._registry,
        )

        self.request_timeouts = Counter(
            "rignum_request_timeouts_total",
            "Requests abandoned with 504 after exceeding the request deadline",
            ["path"],
            registry=self._registry,
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=self._registry)
        logger.info(f"Prometheus metrics server started on port {port}")

    # Convenience methods

    def record_feed_query(
        self,
        status: str,
        latency: float | None = None,
        count: int | None = None,
    ) -> None:
        """
        Record a completed (or failed) feed query.

        Args:
            status: "success" or "error"
            latency: Wall time of the query in seconds
            count: Number of items returned (successful queries only)
        """
        self.feed_requests.labels(status=status).inc()
        if latency is not None:
            self.feed_query_latency.observe(latency)
        if count is not None:
            self.feed_items_returned.observe(count)

    def record_filters(self, filters: list[str]) -> None:
        """Count each optional filter present on a feed query."""
        for name in filters:
            self.feed_filters_used.labels(filter=name).inc()

    def record_storage_error(self, operation: str, error: Exception) -> None:
        """Record a storage failure by operation and exception class."""
        self.storage_errors.labels(
            operation=operation,
            error_type=type(error).__name__,
        ).inc()

    def record_request_timeout(self, path: str) -> None:
        self.request_timeouts.labels(path=path).inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
