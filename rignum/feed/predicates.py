"""
Composable, parameterized WHERE-clause builder for asyncpg.

Each ``require_*`` call records an immutable :class:`Predicate` whose SQL
refers to its own bound values through relative slots (``{0}``, ``{1}``...).
Absolute ``$n`` placeholders are assigned only in :meth:`PredicateBuilder.build`,
while walking the predicates in insertion order, so the placeholder numbers
and the values tuple cannot drift apart no matter which optional filters
were added. Caller-supplied values never appear in the SQL text.
"""

import re
from dataclasses import dataclass
from typing import Any

# Plain or table-qualified column, optionally cast (e.g. "i.entities::text")
_COLUMN_RE = re.compile(
    r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?(::[A-Za-z_][A-Za-z0-9_]*(\[\])?)?$"
)


def _check_column(column: str) -> str:
    if not _COLUMN_RE.match(column):
        raise ValueError(f"Invalid column reference: {column!r}")
    return column


@dataclass(frozen=True)
class Predicate:
    """A boolean SQL expression plus the values its slots bind, in slot order."""

    sql: str
    values: tuple[Any, ...] = ()

    def render(self, start: int) -> str:
        """Render with absolute placeholders, the first slot becoming ``$start``."""
        if not self.values:
            return self.sql
        return self.sql.format(*(f"${start + i}" for i in range(len(self.values))))


@dataclass(frozen=True)
class WhereClause:
    """Rendered conjunction of predicates, ready for ``conn.fetch(sql, *values)``."""

    sql: str
    values: tuple[Any, ...]

    @property
    def next_index(self) -> int:
        """Number of the next free placeholder (for LIMIT and friends)."""
        return len(self.values) + 1


class PredicateBuilder:
    """
    Accumulates AND-ed predicates with their bound values.

    Usage:
        builder = PredicateBuilder()
        builder.require_fixed("i.is_hidden = false")
        builder.require_equals("s.name", "Reddit")
        builder.require_any_ilike(["s.name", "i.content_label"], "tesla")
        where = builder.build()
        # where.sql    -> "i.is_hidden = false AND s.name = $1 AND (s.name ILIKE $2 OR ...)"
        # where.values -> ("Reddit", "%tesla%")
    """

    def __init__(self) -> None:
        self._predicates: list[Predicate] = []

    def __len__(self) -> int:
        return len(self._predicates)

    @property
    def predicates(self) -> tuple[Predicate, ...]:
        return tuple(self._predicates)

    def require_fixed(self, fragment: str) -> "PredicateBuilder":
        """Append a constant expression that binds no value.

        Only for trusted, code-defined fragments (policy predicates).
        """
        self._predicates.append(Predicate(sql=fragment))
        return self

    def require_equals(self, column: str, value: Any) -> "PredicateBuilder":
        """Append ``column = $n``."""
        self._predicates.append(
            Predicate(sql=f"{_check_column(column)} = {{0}}", values=(value,))
        )
        return self

    def require_array_contains(self, column: str, value: str) -> "PredicateBuilder":
        """Append a set-membership test on a ``text[]`` column."""
        self._predicates.append(
            Predicate(
                sql=f"{_check_column(column)} @> ARRAY[{{0}}]::text[]",
                values=(value,),
            )
        )
        return self

    def require_any_ilike(self, columns: list[str], pattern: str) -> "PredicateBuilder":
        """Append an OR group of case-insensitive substring matches.

        Every arm shares a single bound value, ``%pattern%``. ``%`` and ``_``
        inside ``pattern`` keep their LIKE meaning.
        """
        if not columns:
            raise ValueError("require_any_ilike needs at least one column")
        arms = " OR ".join(f"{_check_column(c)} ILIKE {{0}}" for c in columns)
        self._predicates.append(Predicate(sql=f"({arms})", values=(f"%{pattern}%",)))
        return self

    def build(self) -> WhereClause:
        """Concatenate all predicates with AND and number their placeholders."""
        parts: list[str] = []
        values: list[Any] = []
        for predicate in self._predicates:
            parts.append(predicate.render(len(values) + 1))
            values.extend(predicate.values)

        sql = " AND ".join(parts) if parts else "TRUE"
        return WhereClause(sql=sql, values=tuple(values))
