"""Tests for GET /feed."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from rignum.feed.schemas import FeedQuery, SourceRef
from tests.factories import BASE_TIME, make_item, make_item_row


class TestFeedResponseShape:
    """Public response contract."""

    def test_empty_feed(self, client, mock_feed_repo: AsyncMock) -> None:
        resp = client.get("/feed")

        assert resp.status_code == 200
        assert resp.json() == {"items": [], "meta": {"count": 0}}

    def test_item_fields(self, client, mock_feed_repo: AsyncMock) -> None:
        mock_feed_repo.list_items.return_value = [
            make_item(source=SourceRef(name="X", type="Social Network"), visibility_level=1)
        ]

        resp = client.get("/feed")

        assert resp.status_code == 200
        data = resp.json()
        assert data["meta"] == {"count": 1}
        item = data["items"][0]
        assert set(item) == {
            "id",
            "captured_at",
            "expires_at",
            "source",
            "external_url",
            "content_label",
            "market_category",
            "visibility_level",
            "entities",
            "topics",
            "flags",
        }
        assert item["source"] == {"name": "X", "type": "Social Network"}
        assert item["captured_at"] == "2026-10-19T10:00:00+00:00"
        assert item["expires_at"] == "2026-10-20T10:00:00+00:00"
        assert item["visibility_level"] == 1

    def test_empty_collections_serialized_as_lists(self, client, mock_feed_repo: AsyncMock) -> None:
        mock_feed_repo.list_items.return_value = [make_item(topics=[], flags=[], entities={})]

        item = client.get("/feed").json()["items"][0]

        assert item["topics"] == []
        assert item["flags"] == []
        assert item["entities"] == {}

    def test_count_matches_items(self, client, mock_feed_repo: AsyncMock) -> None:
        mock_feed_repo.list_items.return_value = [make_item(id=str(n)) for n in range(3)]

        data = client.get("/feed?limit=3").json()

        assert data["meta"]["count"] == len(data["items"]) == 3

    def test_order_preserved(self, client, mock_feed_repo: AsyncMock) -> None:
        mock_feed_repo.list_items.return_value = [
            make_item(id="10:05", captured_at=BASE_TIME + timedelta(minutes=5)),
            make_item(id="10:02", captured_at=BASE_TIME + timedelta(minutes=2)),
            make_item(id="10:00", captured_at=BASE_TIME),
        ]

        ids = [i["id"] for i in client.get("/feed").json()["items"]]

        assert ids == ["10:05", "10:02", "10:00"]

    def test_request_id_echoed(self, client) -> None:
        resp = client.get("/feed", headers={"X-Request-ID": "req-123"})

        assert resp.headers["X-Request-ID"] == "req-123"


class TestFeedParameters:
    """Query-string handling."""

    def test_limit_defaults(self, client, mock_feed_repo: AsyncMock) -> None:
        client.get("/feed")

        assert mock_feed_repo.list_items.call_args[0][0].limit == 50

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("0", 1),
            ("500", 100),
            ("abc", 50),
            ("", 50),
            ("25", 25),
            ("9" * 5000, 100),
            ("-" + "9" * 5000, 1),
        ],
    )
    def test_limit_clamped_never_rejected(
        self, client, mock_feed_repo: AsyncMock, raw: str, expected: int
    ) -> None:
        resp = client.get("/feed", params={"limit": raw})

        assert resp.status_code == 200
        assert mock_feed_repo.list_items.call_args[0][0].limit == expected

    def test_filters_passed_trimmed(self, client, mock_feed_repo: AsyncMock) -> None:
        client.get(
            "/feed",
            params={"source": " Reddit ", "market": "Crypto", "topic": "Hack", "q": "  eth "},
        )

        query = mock_feed_repo.list_items.call_args[0][0]
        assert query == FeedQuery(q="eth", source="Reddit", market="Crypto", topic="Hack")

    def test_blank_params_same_as_absent(self, client, mock_feed_repo: AsyncMock) -> None:
        client.get("/feed", params={"q": "", "source": "  ", "label": "", "flag": "", "limit": ""})
        blank = mock_feed_repo.list_items.call_args[0][0]

        client.get("/feed")
        absent = mock_feed_repo.list_items.call_args[0][0]

        assert blank == absent == FeedQuery()

    def test_repeated_params_use_first_value(self, client, mock_feed_repo: AsyncMock) -> None:
        resp = client.get("/feed?source=Reddit&source=X&limit=5&limit=90&q=tesla&q=apple")

        assert resp.status_code == 200
        query = mock_feed_repo.list_items.call_args[0][0]
        assert query.source == "Reddit"
        assert query.limit == 5
        assert query.q == "tesla"

    def test_blank_first_value_is_absent(self, client, mock_feed_repo: AsyncMock) -> None:
        client.get("/feed?topic=&topic=Hack")

        assert mock_feed_repo.list_items.call_args[0][0].topic is None


class TestFeedSql:
    """Requests reach the database as one parameterized query."""

    def test_policy_enforced_without_filters(self, sql_client, mock_database: AsyncMock) -> None:
        sql_client.get("/feed")

        sql = mock_database.fetch.call_args[0][0]
        assert "i.expires_at > now()" in sql
        assert "i.status = 'PUBLISHED'" in sql
        assert "i.visibility_level IN (0,1)" in sql
        assert "i.is_hidden = false" in sql
        assert mock_database.fetch.await_count == 1

    def test_hostile_input_stays_bound(self, sql_client, mock_database: AsyncMock) -> None:
        hostile = "x' OR visibility_level = 2 --"

        resp = sql_client.get("/feed", params={"source": hostile, "q": hostile})

        assert resp.status_code == 200
        args = mock_database.fetch.call_args[0]
        assert hostile not in args[0]
        assert args[1:] == (hostile, f"%{hostile}%", 50)

    def test_rows_mapped(self, sql_client, mock_database: AsyncMock) -> None:
        mock_database.fetch.return_value = [make_item_row(topics=None, flags=None)]

        item = sql_client.get("/feed", params={"q": "tesla"}).json()["items"][0]

        assert item["id"] == "0b4f5f52-7d43-4b0e-9a55-3f6f0d1c2a10"
        assert item["source"] == {"name": "Discord", "type": "Chat Platform"}
        assert item["entities"]["tickers"] == ["TSLA"]
        assert item["topics"] == []
        assert item["flags"] == []


class TestFeedErrors:
    """Storage failures become a generic 500 with no partial results."""

    def test_storage_failure_is_500(self, client, mock_feed_repo: AsyncMock) -> None:
        mock_feed_repo.list_items.side_effect = ConnectionError("connection refused")

        resp = client.get("/feed")

        assert resp.status_code == 500
        assert resp.json() == {"detail": "Failed to load feed"}
        assert "connection refused" not in resp.text
