"""Builders for feed rows and items shared across test packages."""

import uuid
from datetime import datetime, timedelta, timezone

from rignum.feed.schemas import FeedItem, SourceRef

BASE_TIME = datetime(2026, 10, 19, 10, 0, 0, tzinfo=timezone.utc)


def make_item_row(**overrides) -> dict:
    """A dict mimicking an asyncpg Record returned by the feed query."""
    captured = overrides.pop("captured_at", BASE_TIME)
    row = {
        "id": uuid.UUID("0b4f5f52-7d43-4b0e-9a55-3f6f0d1c2a10"),
        "captured_at": captured,
        "expires_at": captured + timedelta(hours=24),
        "external_url": "https://discord.com/channels/example/3333",
        "content_label": "Question",
        "market_category": "Stocks",
        "visibility_level": 0,
        "entities": {
            "companies": ["Tesla"],
            "tickers": ["TSLA"],
            "cryptocurrencies": [],
            "protocols": [],
            "exchanges": [],
        },
        "topics": ["Lawsuit", "Investigation"],
        "flags": ["Unverified", "User-generated", "Automated collection"],
        "source_name": "Discord",
        "source_type": "Chat Platform",
    }
    row.update(overrides)
    return row


def make_item(**overrides) -> FeedItem:
    """A FeedItem with sensible defaults."""
    captured = overrides.pop("captured_at", BASE_TIME)
    return FeedItem(
        id=overrides.pop("id", "0b4f5f52-7d43-4b0e-9a55-3f6f0d1c2a10"),
        captured_at=captured,
        expires_at=overrides.pop("expires_at", captured + timedelta(hours=24)),
        source=overrides.pop("source", SourceRef(name="Reddit", type="Forum")),
        external_url=overrides.pop(
            "external_url", "https://www.reddit.com/r/stocks/comments/example1"
        ),
        content_label=overrides.pop("content_label", "Rumor"),
        market_category=overrides.pop("market_category", "Stocks"),
        visibility_level=overrides.pop("visibility_level", 0),
        entities=overrides.pop(
            "entities", {"companies": ["Microsoft"], "tickers": ["MSFT"]}
        ),
        topics=overrides.pop("topics", ["Earnings", "Corporate Announcement"]),
        flags=overrides.pop("flags", ["Unverified", "User-generated"]),
        **overrides,
    )
