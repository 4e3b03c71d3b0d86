"""Public feed endpoint."""

import time

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.requests import Request

from rignum.api.dependencies import get_feed_engine
from rignum.api.models import ErrorResponse, FeedResponse
from rignum.api.rate_limit import limiter
from rignum.config.settings import get_settings as _get_settings
from rignum.feed.engine import FeedQueryEngine
from rignum.feed.schemas import FILTER_PARAMS

logger = structlog.get_logger(__name__)
router = APIRouter()

_FEED_PARAMS = (*FILTER_PARAMS, "limit")


def _first_values(request: Request) -> dict[str, str | None]:
    """Feed parameters from the query string, first occurrence winning.

    Starlette's ``query_params.get`` returns the last of a repeated key, so
    ``?source=Reddit&source=X`` would otherwise filter on ``X``.
    """
    return {
        name: next(iter(request.query_params.getlist(name)), None)
        for name in _FEED_PARAMS
    }


@router.get(
    "/feed",
    response_model=FeedResponse,
    responses={500: {"model": ErrorResponse, "description": "Storage failure"}},
    summary="Query the feed",
    description=(
        "Newest-first page of live, published, visible items. "
        "All supplied filters are combined with AND; blank values are ignored. "
        "When a parameter is repeated, its first value is used."
    ),
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def get_feed(
    request: Request,
    # Declared for the OpenAPI schema; values are read by _first_values()
    q: str | None = Query(default=None, description="Free-text search over source, market, label, entities and topics"),
    source: str | None = Query(default=None, description="Exact source name"),
    market: str | None = Query(default=None, description="Exact market category"),
    label: str | None = Query(default=None, description="Exact content label"),
    flag: str | None = Query(default=None, description="Items carrying this flag"),
    topic: str | None = Query(default=None, description="Items tagged with this topic"),
    # Kept as text: malformed values fall back to the default instead of 422
    limit: str | None = Query(default=None, description="Page size, 1-100 (default 50)"),
    engine: FeedQueryEngine = Depends(get_feed_engine),
) -> FeedResponse:
    query = engine.parse(_first_values(request))
    start = time.perf_counter()

    try:
        page = await engine.run(query)
    except Exception as e:
        logger.error(
            "feed_query_failed",
            error=str(e),
            filters=query.active_filters,
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail="Failed to load feed")

    logger.info(
        "feed_served",
        count=page.count,
        limit=query.limit,
        filters=query.active_filters,
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return FeedResponse.from_page(page)
