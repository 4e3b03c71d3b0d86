"""Database repository for the public feed (items joined to sources)."""

import json
import logging
from typing import Any

from rignum.feed.policy import MANDATORY_PREDICATES, PUBLISHED_STATUS, RETENTION_HOURS
from rignum.feed.predicates import PredicateBuilder, WhereClause
from rignum.feed.schemas import FeedItem, FeedQuery, SourceRef
from rignum.storage.database import Database

logger = logging.getLogger(__name__)

_CREATE_TABLES_SQL = f"""
CREATE TABLE IF NOT EXISTS sources (
    id           UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name         TEXT NOT NULL UNIQUE,
    source_type  TEXT NOT NULL,
    base_url     TEXT,
    is_enabled   BOOLEAN NOT NULL DEFAULT TRUE,
    created_at   TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS items (
    id                 UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    source_id          UUID NOT NULL REFERENCES sources(id),
    external_url       TEXT NOT NULL,
    external_url_hash  TEXT NOT NULL UNIQUE,
    captured_at        TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    expires_at         TIMESTAMPTZ NOT NULL DEFAULT NOW() + INTERVAL '{RETENTION_HOURS} hours',
    content_label      TEXT NOT NULL,
    market_category    TEXT NOT NULL,
    visibility_level   SMALLINT NOT NULL DEFAULT 0
        CHECK (visibility_level BETWEEN 0 AND 3),
    is_hidden          BOOLEAN NOT NULL DEFAULT FALSE,
    entities           JSONB NOT NULL DEFAULT '{{}}',
    topics             TEXT[] NOT NULL DEFAULT '{{}}',
    flags              TEXT[] NOT NULL DEFAULT '{{}}',
    risk_signals       JSONB NOT NULL DEFAULT '{{}}',
    status             TEXT NOT NULL DEFAULT '{PUBLISHED_STATUS}',
    CHECK (expires_at > captured_at)
);

CREATE INDEX IF NOT EXISTS idx_items_captured_at
    ON items(captured_at DESC);
CREATE INDEX IF NOT EXISTS idx_items_expires_at
    ON items(expires_at);
CREATE INDEX IF NOT EXISTS idx_items_source_id
    ON items(source_id);
CREATE INDEX IF NOT EXISTS idx_items_topics
    ON items USING GIN(topics);
CREATE INDEX IF NOT EXISTS idx_items_flags
    ON items USING GIN(flags);
"""

_FEED_COLUMNS = """
    i.id,
    i.captured_at,
    i.expires_at,
    i.external_url,
    i.content_label,
    i.market_category,
    i.visibility_level,
    i.entities,
    i.topics,
    i.flags,
    s.name AS source_name,
    s.source_type AS source_type
"""

# Free-text search is a metadata-only substring match. entities and topics
# are matched on their text rendering.
SEARCH_COLUMNS: tuple[str, ...] = (
    "s.name",
    "i.market_category",
    "i.content_label",
    "i.entities::text",
    "i.topics::text",
)


def build_feed_filters(query: FeedQuery) -> WhereClause:
    """
    Compose the WHERE clause for a feed query.

    Policy predicates come first and are unconditional; caller filters are
    only ever AND-ed onto them.
    """
    builder = PredicateBuilder()
    for fragment in MANDATORY_PREDICATES:
        builder.require_fixed(fragment)

    if query.source is not None:
        builder.require_equals("s.name", query.source)
    if query.market is not None:
        builder.require_equals("i.market_category", query.market)
    if query.label is not None:
        builder.require_equals("i.content_label", query.label)
    if query.flag is not None:
        builder.require_array_contains("i.flags", query.flag)
    if query.topic is not None:
        builder.require_array_contains("i.topics", query.topic)
    if query.q is not None:
        builder.require_any_ilike(list(SEARCH_COLUMNS), query.q)

    return builder.build()


def _parse_entities(entities: dict | str | None) -> dict[str, Any]:
    """Parse the entities JSONB value to a plain dict."""
    if entities is None:
        return {}
    if isinstance(entities, str):
        return json.loads(entities)
    return dict(entities)


def _record_to_item(record) -> FeedItem:
    """Convert an asyncpg Record from the feed query to a FeedItem."""
    return FeedItem(
        id=str(record["id"]),
        captured_at=record["captured_at"],
        expires_at=record["expires_at"],
        source=SourceRef(name=record["source_name"], type=record["source_type"]),
        external_url=record["external_url"],
        content_label=record["content_label"],
        market_category=record["market_category"],
        visibility_level=record["visibility_level"],
        entities=_parse_entities(record["entities"]),
        topics=list(record["topics"] or []),
        flags=list(record["flags"] or []),
    )


class FeedRepository:
    """Read access to feed items and their sources."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_tables(self) -> None:
        """Create the sources and items tables and indexes (idempotent)."""
        await self._db.execute(_CREATE_TABLES_SQL)
        logger.info("Feed tables ensured")

    async def list_items(self, query: FeedQuery) -> list[FeedItem]:
        """
        Run the single feed SELECT for ``query``.

        Newest first by captured_at with no secondary sort key; LIMIT is
        bound as the last parameter.
        """
        where = build_feed_filters(query)
        sql = f"""
            SELECT {_FEED_COLUMNS}
            FROM items i
            JOIN sources s ON s.id = i.source_id
            WHERE {where.sql}
            ORDER BY i.captured_at DESC
            LIMIT ${where.next_index}
        """
        rows = await self._db.fetch(sql, *where.values, query.limit)
        return [_record_to_item(r) for r in rows]

    async def list_enabled_sources(self) -> list[SourceRef]:
        """Enabled sources, alphabetical by name."""
        rows = await self._db.fetch(
            "SELECT name, source_type FROM sources WHERE is_enabled = TRUE ORDER BY name ASC"
        )
        return [SourceRef(name=r["name"], type=r["source_type"]) for r in rows]
