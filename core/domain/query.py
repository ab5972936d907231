"""
Table query configuration.

A TableQuery describes what a LiveTable reads: which columns to project,
which related tables to expand, how to filter and how to order. It is an
immutable value; building the actual remote request is the adapter's job.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from core.domain.exceptions import InvalidQueryError

Row = Dict[str, Any]

MEMBERSHIP_TYPES = (list, tuple, set, frozenset)


@dataclass(frozen=True)
class OrderBy:
    """Single-column ordering."""

    column: str
    ascending: bool = True

    def __post_init__(self):
        if not self.column or not self.column.strip():
            raise InvalidQueryError("Order column cannot be empty")

    @classmethod
    def parse(cls, value: str) -> "OrderBy":
        """
        Parse ``column``, ``column:asc``, ``column:desc`` or ``-column``.

        Args:
            value: Ordering expression

        Returns:
            OrderBy instance
        """
        value = value.strip()
        if value.startswith("-"):
            return cls(value[1:], ascending=False)
        column, _, direction = value.partition(":")
        direction = direction.strip().lower()
        if direction not in ("", "asc", "desc"):
            raise InvalidQueryError(f"Unknown ordering direction: {direction}")
        return cls(column.strip(), ascending=direction != "desc")


@dataclass(frozen=True)
class FilterClause:
    """One resolved filter constraint."""

    column: str
    operator: str  # "eq" or "in"
    value: Any


@dataclass(frozen=True)
class TableQuery:
    """
    Read configuration for one remote table.

    Attributes:
        filter: column -> scalar (equality) or sequence (membership).
            ``None`` values impose no constraint.
        order_by: Optional single-column ordering. ``None`` keeps the
            server's default order.
        joins: Related-table expansion expressions appended to the
            projection.
        select: Base projection, ``*`` unless narrowed.
        realtime: Refetch on every change notification once started.
    """

    filter: Mapping[str, Any] = field(default_factory=dict)
    order_by: Optional[OrderBy] = None
    joins: Tuple[str, ...] = ()
    select: str = "*"
    realtime: bool = False

    def __post_init__(self):
        object.__setattr__(self, "filter", dict(self.filter or {}))
        object.__setattr__(self, "joins", tuple(self.joins or ()))
        for column in self.filter:
            if not column:
                raise InvalidQueryError("Filter column cannot be empty")

    @property
    def projection(self) -> str:
        """Select clause sent to the remote service."""
        if self.joins:
            return "*, " + ", ".join(self.joins)
        return self.select or "*"

    def clauses(self) -> List[FilterClause]:
        """Resolve the filter mapping into equality/membership clauses."""
        resolved = []
        for column, value in self.filter.items():
            if value is None:
                continue
            if isinstance(value, MEMBERSHIP_TYPES):
                resolved.append(FilterClause(column, "in", list(value)))
            else:
                resolved.append(FilterClause(column, "eq", value))
        return resolved

    def with_filter(self, **columns: Any) -> "TableQuery":
        """Return a copy with extra filter columns merged in."""
        merged = dict(self.filter)
        merged.update(columns)
        return TableQuery(
            filter=merged,
            order_by=self.order_by,
            joins=self.joins,
            select=self.select,
            realtime=self.realtime,
        )


def parse_filter_args(pairs: Iterable[str]) -> Dict[str, Any]:
    """
    Parse ``column=value`` strings into a filter mapping.

    Comma-separated values become membership lists; ``true``/``false``
    become booleans.
    """
    parsed: Dict[str, Any] = {}
    for pair in pairs:
        column, sep, raw = pair.partition("=")
        if not sep or not column:
            raise InvalidQueryError(f"Expected column=value, got {pair!r}")
        if "," in raw:
            parsed[column] = [_coerce(part) for part in raw.split(",") if part]
        else:
            parsed[column] = _coerce(raw)
    return parsed


def _coerce(raw: str) -> Any:
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return raw
