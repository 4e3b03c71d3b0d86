"""Tests for GET /tags."""

from rignum.feed.policy import CONTENT_LABELS, FLAGS, MARKET_CATEGORIES, TOPICS


def test_tags_returns_vocabularies(client) -> None:
    resp = client.get("/tags")

    assert resp.status_code == 200
    assert resp.json() == {
        "content_labels": list(CONTENT_LABELS),
        "market_categories": list(MARKET_CATEGORIES),
        "topics": list(TOPICS),
        "flags": list(FLAGS),
    }


def test_tags_does_not_touch_database(client, mock_database) -> None:
    client.get("/tags")

    mock_database.fetch.assert_not_awaited()
