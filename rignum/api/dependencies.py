"""
Dependency injection for FastAPI endpoints.

The connection pool is owned by the application lifespan and lives on
``app.state.database``; everything else is built per request on top of it.
"""

from fastapi import Depends, Request

from rignum.feed.config import FeedConfig
from rignum.feed.engine import FeedQueryEngine
from rignum.feed.repository import FeedRepository
from rignum.observability.metrics import get_metrics
from rignum.storage.database import Database

_feed_config: FeedConfig | None = None


def get_database(request: Request) -> Database:
    """Return the pool created by the application lifespan."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized. Is the app lifespan running?")
    return database


def get_feed_config() -> FeedConfig:
    """Feed page-size bounds, loaded once from FEED_* env vars."""
    global _feed_config
    if _feed_config is None:
        _feed_config = FeedConfig()
    return _feed_config


def get_feed_repository(database: Database = Depends(get_database)) -> FeedRepository:
    return FeedRepository(database)


def get_feed_engine(
    repository: FeedRepository = Depends(get_feed_repository),
    config: FeedConfig = Depends(get_feed_config),
) -> FeedQueryEngine:
    """Feed engine bound to the shared pool. Holds no state between requests."""
    return FeedQueryEngine(repository, config=config, metrics=get_metrics())
