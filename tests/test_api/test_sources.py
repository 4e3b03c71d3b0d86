"""Tests for GET /sources."""

from unittest.mock import AsyncMock

from rignum.feed.schemas import SourceRef


class TestSourcesEndpoint:
    """Enabled-source listing."""

    def test_lists_sources(self, client, mock_feed_repo: AsyncMock) -> None:
        mock_feed_repo.list_enabled_sources.return_value = [
            SourceRef(name="Discord", type="Chat Platform"),
            SourceRef(name="Reddit", type="Forum"),
        ]

        resp = client.get("/sources")

        assert resp.status_code == 200
        assert resp.json() == {
            "sources": [
                {"name": "Discord", "type": "Chat Platform"},
                {"name": "Reddit", "type": "Forum"},
            ]
        }

    def test_empty(self, client) -> None:
        resp = client.get("/sources")

        assert resp.status_code == 200
        assert resp.json() == {"sources": []}

    def test_storage_failure_is_500(self, client, mock_feed_repo: AsyncMock) -> None:
        mock_feed_repo.list_enabled_sources.side_effect = ConnectionError("down")

        resp = client.get("/sources")

        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to list sources"

    def test_reads_enabled_sources_table(self, sql_client, mock_database: AsyncMock) -> None:
        mock_database.fetch.return_value = [{"name": "X", "source_type": "Social Network"}]

        resp = sql_client.get("/sources")

        assert resp.json()["sources"] == [{"name": "X", "type": "Social Network"}]
        assert "is_enabled = TRUE" in mock_database.fetch.call_args[0][0]
