"""
Feed query engine.

Turns raw, untrusted query parameters into one policy-gated feed page:

    params -> FeedQuery (trim, clamp) -> WHERE (policy + filters)
           -> single SELECT -> FeedItem records -> FeedPage

The engine keeps no mutable state between calls and does not catch storage
errors: a failed query fails the whole request with no partial page.
"""

import time
from collections.abc import Mapping

import structlog

from rignum.feed.config import FeedConfig
from rignum.feed.repository import FeedRepository
from rignum.feed.schemas import FeedPage, FeedQuery, SourceRef
from rignum.observability.metrics import MetricsCollector, get_metrics
from rignum.observability.tracing import get_tracer, traced

logger = structlog.get_logger(__name__)


class FeedQueryEngine:
    """Public contract of the feed, backed by an injected FeedRepository."""

    def __init__(
        self,
        repository: FeedRepository,
        config: FeedConfig | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._repo = repository
        self._config = config or FeedConfig()
        self._metrics = metrics
        self._tracer = get_tracer("rignum.feed")

    @property
    def metrics(self) -> MetricsCollector:
        if self._metrics is None:
            self._metrics = get_metrics()
        return self._metrics

    def parse(self, params: Mapping[str, str | None]) -> FeedQuery:
        """Sanitize raw parameters. Never raises on malformed input."""
        return FeedQuery.from_params(params, self._config)

    async def query(self, params: Mapping[str, str | None]) -> FeedPage:
        """Parse ``params`` and fetch one feed page."""
        return await self.run(self.parse(params))

    async def run(self, query: FeedQuery) -> FeedPage:
        """Fetch one feed page for an already sanitized query."""
        filters = query.active_filters
        start = time.perf_counter()

        try:
            with traced(
                self._tracer,
                "feed.query",
                {"feed.limit": query.limit, "feed.filters": ",".join(filters)},
            ) as span:
                items = await self._repo.list_items(query)
                span.set_attribute("feed.count", len(items))
        except Exception as e:
            self.metrics.record_feed_query("error", latency=time.perf_counter() - start)
            self.metrics.record_storage_error("feed_query", e)
            raise

        latency = time.perf_counter() - start
        page = FeedPage(items=items)
        self.metrics.record_feed_query("success", latency=latency, count=page.count)
        self.metrics.record_filters(filters)

        logger.debug(
            "Feed query served",
            filters=filters,
            limit=query.limit,
            count=page.count,
            latency_ms=round(latency * 1000, 2),
        )
        return page

    async def sources(self) -> list[SourceRef]:
        """Enabled sources for populating the source filter."""
        return await self._repo.list_enabled_sources()
