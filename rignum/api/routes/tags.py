"""Closed vocabularies for feed filter widgets."""

from fastapi import APIRouter

from rignum.api.models import TagsResponse
from rignum.feed.policy import vocabularies

router = APIRouter()


@router.get(
    "/tags",
    response_model=TagsResponse,
    summary="Allowed filter values",
    description="Static contract; values outside these lists are still matched by exact filters.",
)
async def list_tags() -> TagsResponse:
    return TagsResponse(**vocabularies())
