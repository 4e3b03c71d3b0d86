"""Configuration for the feed query engine."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedConfig(BaseSettings):
    """Page size bounds for feed queries."""

    model_config = SettingsConfigDict(
        env_prefix="FEED_",
        case_sensitive=False,
        extra="ignore",
    )

    default_limit: int = Field(
        default=50,
        ge=1,
        description="Page size when the caller omits limit or sends garbage",
    )
    min_limit: int = Field(default=1, ge=1, description="Smallest page size served")
    max_limit: int = Field(default=100, ge=1, description="Largest page size served")

    @model_validator(mode="after")
    def _check_bounds(self) -> "FeedConfig":
        if not self.min_limit <= self.default_limit <= self.max_limit:
            raise ValueError("feed limits must satisfy min_limit <= default_limit <= max_limit")
        return self
