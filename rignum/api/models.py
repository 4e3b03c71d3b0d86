"""
Response models for the feed API.
"""

from pydantic import BaseModel, Field

from rignum.feed.schemas import FeedItem, FeedPage, SourceRef


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="error",
        description="Error type",
    )


# Feed models


class SourceModel(BaseModel):
    """Originating platform of an item."""

    name: str = Field(..., description="Unique source name, e.g. Reddit")
    type: str = Field(..., description="Source type, e.g. Forum")

    @classmethod
    def from_ref(cls, ref: SourceRef) -> "SourceModel":
        return cls(name=ref.name, type=ref.type)


class FeedItemModel(BaseModel):
    """One item of the public feed."""

    id: str = Field(..., description="Opaque item identifier")
    captured_at: str = Field(..., description="Capture time (ISO 8601)")
    expires_at: str = Field(..., description="End of the retention window (ISO 8601)")
    source: SourceModel
    external_url: str = Field(..., description="Link to the original content")
    content_label: str = Field(..., description="Rumor, Opinion, Claim, Question or Announcement")
    market_category: str = Field(..., description="Stocks, Crypto, FX, Commodities, Macro or Multi-market")
    visibility_level: int = Field(
        ...,
        ge=0,
        le=1,
        description="0 = fully visible, 1 = limited display",
    )
    entities: dict = Field(
        default_factory=dict,
        description="Entity category -> entity names",
    )
    topics: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)

    @classmethod
    def from_item(cls, item: FeedItem) -> "FeedItemModel":
        return cls(
            id=item.id,
            captured_at=item.captured_at.isoformat(),
            expires_at=item.expires_at.isoformat(),
            source=SourceModel.from_ref(item.source),
            external_url=item.external_url,
            content_label=item.content_label,
            market_category=item.market_category,
            visibility_level=item.visibility_level,
            entities=item.entities,
            topics=item.topics,
            flags=item.flags,
        )


class FeedMeta(BaseModel):
    """Feed page metadata."""

    count: int = Field(..., ge=0, description="Number of items on this page")


class FeedResponse(BaseModel):
    """Response model for GET /feed."""

    items: list[FeedItemModel] = Field(default_factory=list)
    meta: FeedMeta

    @classmethod
    def from_page(cls, page: FeedPage) -> "FeedResponse":
        return cls(
            items=[FeedItemModel.from_item(i) for i in page.items],
            meta=FeedMeta(count=page.count),
        )


class SourcesResponse(BaseModel):
    """Response model for GET /sources."""

    sources: list[SourceModel] = Field(default_factory=list)


class TagsResponse(BaseModel):
    """Closed vocabularies for client-side filter widgets."""

    content_labels: list[str]
    market_categories: list[str]
    topics: list[str]
    flags: list[str]


# Health models


class ComponentHealth(BaseModel):
    """Health of a single dependency."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency in milliseconds")
    details: dict = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or unhealthy",
    )
    version: str
    components: dict[str, ComponentHealth] = Field(default_factory=dict)
