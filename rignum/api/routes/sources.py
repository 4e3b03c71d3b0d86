"""Source listing used to populate the feed's source filter."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from starlette.requests import Request

from rignum.api.dependencies import get_feed_engine
from rignum.api.models import ErrorResponse, SourceModel, SourcesResponse
from rignum.api.rate_limit import limiter
from rignum.config.settings import get_settings as _get_settings
from rignum.feed.engine import FeedQueryEngine

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/sources",
    response_model=SourcesResponse,
    responses={500: {"model": ErrorResponse}},
    summary="List enabled sources",
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def list_sources(
    request: Request,
    engine: FeedQueryEngine = Depends(get_feed_engine),
) -> SourcesResponse:
    try:
        sources = await engine.sources()
    except Exception as e:
        logger.error("list_sources_failed", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list sources")

    return SourcesResponse(sources=[SourceModel.from_ref(s) for s in sources])
