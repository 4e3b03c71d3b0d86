"""
Closed vocabularies and visibility policy for the public feed.

The vocabularies are a client contract (served by ``GET /tags`` to populate
filter widgets). They are not enforced as filters: a value stored outside
these lists still matches an exact-filter query. The safety boundary is the
set of mandatory predicates in ``MANDATORY_PREDICATES``.
"""

CONTENT_LABELS: tuple[str, ...] = (
    "Rumor",
    "Opinion",
    "Claim",
    "Question",
    "Announcement",
)

MARKET_CATEGORIES: tuple[str, ...] = (
    "Stocks",
    "Crypto",
    "FX",
    "Commodities",
    "Macro",
    "Multi-market",
)

TOPICS: tuple[str, ...] = (
    "Earnings",
    "Financial Results",
    "Corporate Announcement",
    "Management Change",
    "Layoffs",
    "Restructuring",
    "Bankruptcy Filing",
    "Merger",
    "Acquisition",
    "Lawsuit",
    "Investigation",
    "Hack",
    "Exploit",
    "Security Incident",
    "Network Outage",
    "Fork",
    "Token Issuance",
    "Token Burn",
    "Stablecoin Event",
    "Exchange Incident",
    "Regulation",
    "Court Ruling",
    "Policy Statement",
    "Listing",
    "Delisting",
)

FLAGS: tuple[str, ...] = (
    "Unverified",
    "User-generated",
    "Automated collection",
    "Forward-looking claim present",
    "Numeric claim present",
    "Extreme statement",
)

# Moderation gate: 0 = fully visible, 1 = limited display, 2-3 = suppressed
VISIBLE_LEVELS: tuple[int, ...] = (0, 1)

PUBLISHED_STATUS = "PUBLISHED"

# Items expire this long after capture unless the writer sets expires_at
RETENTION_HOURS = 24

# Applied to every feed query, ahead of any caller-supplied filter.
MANDATORY_PREDICATES: tuple[str, ...] = (
    "i.expires_at > now()",
    f"i.status = '{PUBLISHED_STATUS}'",
    f"i.visibility_level IN ({','.join(str(level) for level in VISIBLE_LEVELS)})",
    "i.is_hidden = false",
)


def vocabularies() -> dict[str, list[str]]:
    """Closed vocabularies keyed the way ``GET /tags`` serves them."""
    return {
        "content_labels": list(CONTENT_LABELS),
        "market_categories": list(MARKET_CATEGORIES),
        "topics": list(TOPICS),
        "flags": list(FLAGS),
    }
