"""Feed: policy-gated, filterable query engine over captured items."""

from rignum.feed.config import FeedConfig
from rignum.feed.engine import FeedQueryEngine
from rignum.feed.predicates import Predicate, PredicateBuilder, WhereClause
from rignum.feed.repository import FeedRepository, build_feed_filters
from rignum.feed.schemas import FeedItem, FeedPage, FeedQuery, SourceRef

__all__ = [
    "FeedConfig",
    "FeedItem",
    "FeedPage",
    "FeedQuery",
    "FeedQueryEngine",
    "FeedRepository",
    "Predicate",
    "PredicateBuilder",
    "SourceRef",
    "WhereClause",
    "build_feed_filters",
]
