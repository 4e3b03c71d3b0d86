"""Shared fixtures for API tests."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from rignum.api.app import create_app
from rignum.api.dependencies import get_feed_repository
from rignum.feed.repository import FeedRepository


@pytest.fixture
def mock_feed_repo() -> AsyncMock:
    """Mock FeedRepository."""
    repo = AsyncMock(spec=FeedRepository)
    repo.list_items = AsyncMock(return_value=[])
    repo.list_enabled_sources = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def client(mock_database, mock_feed_repo):
    """FastAPI TestClient over a mocked pool and repository."""
    app = create_app(database=mock_database)
    app.dependency_overrides[get_feed_repository] = lambda: mock_feed_repo

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def sql_client(mock_database):
    """TestClient wired through the real repository, so SQL reaches mock_database."""
    app = create_app(database=mock_database)

    with TestClient(app) as c:
        yield c
