"""Data models for the feed query engine."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from rignum.feed.config import FeedConfig

# Leading integer, the way lenient query-string parsers read "20items" as 20
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

# Optional string filters, in the order their predicates are appended
FILTER_PARAMS: tuple[str, ...] = ("source", "market", "label", "flag", "topic", "q")


def clamp_int(value: str | int | None, default: int, minimum: int, maximum: int) -> int:
    """Parse ``value`` as an integer and clamp it to ``[minimum, maximum]``.

    Missing, empty or non-numeric input yields ``default``; it never raises.
    """
    if value is None or value == "":
        n = default
    elif isinstance(value, int):
        n = value
    else:
        match = _LEADING_INT_RE.match(value)
        n = _parse_leading_int(match.group(1), minimum, maximum) if match else default
    return max(minimum, min(maximum, n))


def _parse_leading_int(digits: str, minimum: int, maximum: int) -> int:
    # int() refuses digit strings past sys.get_int_max_str_digits(); anything
    # wider than the bounds is out of range regardless of its exact value.
    negative = digits.startswith("-")
    magnitude = digits.lstrip("+-").lstrip("0") or "0"
    if len(magnitude) > len(str(max(abs(minimum), abs(maximum)))):
        return minimum if negative else maximum
    return -int(magnitude) if negative else int(magnitude)


def clean_param(value: str | None) -> str | None:
    """Trim a query parameter; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class FeedQuery:
    """Sanitized feed parameters. Absent filters are None, never ""."""

    q: str | None = None
    source: str | None = None
    market: str | None = None
    label: str | None = None
    flag: str | None = None
    topic: str | None = None
    limit: int = 50

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str | None],
        config: FeedConfig | None = None,
    ) -> "FeedQuery":
        """Build a query from raw, untrusted request parameters."""
        config = config or FeedConfig()
        return cls(
            **{name: clean_param(params.get(name)) for name in FILTER_PARAMS},
            limit=clamp_int(
                params.get("limit"),
                default=config.default_limit,
                minimum=config.min_limit,
                maximum=config.max_limit,
            ),
        )

    @property
    def active_filters(self) -> list[str]:
        """Names of the optional filters present on this query."""
        return [name for name in FILTER_PARAMS if getattr(self, name) is not None]


@dataclass(frozen=True)
class SourceRef:
    """Display metadata of the platform an item came from."""

    name: str
    type: str


@dataclass
class FeedItem:
    """Public, read-only projection of an item row."""

    id: str
    captured_at: datetime
    expires_at: datetime
    source: SourceRef
    external_url: str
    content_label: str
    market_category: str
    visibility_level: int
    entities: dict[str, Any] = field(default_factory=dict)
    topics: list[str] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)


@dataclass
class FeedPage:
    """One capped, newest-first page of feed items."""

    items: list[FeedItem]

    @property
    def count(self) -> int:
        """Rows returned on this page (not a total matching count)."""
        return len(self.items)
