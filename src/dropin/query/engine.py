"""Filtered reads over the sports_schedule view.

A ``ScheduleQuery`` carries one optional field per filter. The WHERE clause
is built by folding the present filters into a conjunction of
``Predicate`` objects, each holding SQL text with ``?`` placeholders and its
bound parameters, so no caller value is ever spliced into the SQL.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

import duckdb

from dropin.artifact import ScheduleDatabase
from dropin.exceptions import QueryError
from dropin.logging_config import create_logger
from dropin.schema import VIEW_COLUMNS, VIEW_NAME

logger = create_logger(__name__)

DateLike = Union[date, str]

DEFAULT_ORDER = ('"date"', "start_hour")


class TimeOfDay(Enum):
    """Coarse schedule buckets over start_hour, each half-open [start, end)."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"

    @property
    def hours(self) -> Tuple[int, int]:
        return _BUCKET_HOURS[self]

    def contains(self, hour: int) -> bool:
        start, end = self.hours
        return start <= hour < end


_BUCKET_HOURS = {
    TimeOfDay.MORNING: (6, 12),
    TimeOfDay.AFTERNOON: (12, 17),
    TimeOfDay.EVENING: (17, 22),
}


@dataclass(frozen=True)
class Predicate:
    """A parameterized boolean SQL expression."""

    sql: str
    params: Tuple[Any, ...] = ()

    @classmethod
    def all_of(cls, predicates: Iterable[Optional["Predicate"]]) -> "Predicate":
        """AND together the given predicates, skipping absent ones."""
        present = [p for p in predicates if p is not None]
        if not present:
            return cls("TRUE")
        return cls(
            " AND ".join(f"({p.sql})" for p in present),
            tuple(param for p in present for param in p.params),
        )

    @classmethod
    def any_of(cls, predicates: Iterable["Predicate"]) -> Optional["Predicate"]:
        """OR together the given predicates, or None when there are none."""
        present = list(predicates)
        if not present:
            return None
        return cls(
            " OR ".join(f"({p.sql})" for p in present),
            tuple(param for p in present for param in p.params),
        )


def _quote(column: str) -> str:
    return f'"{column}"'


def membership(column: str, values: Iterable[str]) -> Optional[Predicate]:
    """``column IN (...)``, or None when ``values`` is empty.

    An empty set places no restriction on the column.
    """
    values = sorted(set(values))
    if not values:
        return None
    placeholders = ", ".join("?" for _ in values)
    return Predicate(f"{_quote(column)} IN ({placeholders})", tuple(values))


def date_between(start: str, end: str) -> Predicate:
    """Inclusive on both ends."""
    return Predicate('"date" >= ? AND "date" <= ?', (start, end))


def time_bucket(bucket: Optional[TimeOfDay]) -> Optional[Predicate]:
    if bucket is None:
        return None
    start, end = bucket.hours
    return Predicate("start_hour >= ? AND start_hour < ?", (start, end))


SEARCH_COLUMNS = ("sport", "location_name", "address")


def text_search(text: str) -> Optional[Predicate]:
    """Substring match against the sport, location name or address."""
    if not text:
        return None
    pattern = f"%{text}%"
    return Predicate.any_of(
        Predicate(f"{_quote(column)} ILIKE ?", (pattern,)) for column in SEARCH_COLUMNS
    )


def _as_iso_date(value: Optional[DateLike], name: str) -> str:
    if value is None or value == "":
        raise QueryError(f"{name} is required")
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return date.fromisoformat(value).isoformat()
    except (TypeError, ValueError) as e:
        raise QueryError(f"{name} is not an ISO date: {value!r}") from e


def _as_values(values: FrozenSet[Any], name: str) -> FrozenSet[str]:
    invalid = [v for v in values if not isinstance(v, str)]
    if invalid:
        raise QueryError(f"{name} must contain only strings, got {invalid!r}")
    return values


def _as_bucket(value: Union[TimeOfDay, str, None]) -> Optional[TimeOfDay]:
    if value is None or value == "":
        return None
    if isinstance(value, TimeOfDay):
        return value
    try:
        return TimeOfDay(value)
    except ValueError as e:
        raise QueryError(f"Unknown time of day: {value!r}") from e


@dataclass(frozen=True)
class ScheduleQuery:
    """One schedule request.

    ``start_date`` and ``end_date`` are required. Every other filter is
    optional, and an empty collection means "any".
    """

    start_date: Optional[DateLike]
    end_date: Optional[DateLike]
    sports: FrozenSet[str] = field(default_factory=frozenset)
    days: FrozenSet[str] = field(default_factory=frozenset)
    locations: FrozenSet[str] = field(default_factory=frozenset)
    time_of_day: Union[TimeOfDay, str, None] = None
    search_text: str = ""
    sort_key: Optional[str] = None
    sort_direction: str = "asc"

    def __post_init__(self):
        # accept any iterable for the set-valued filters
        for name in ("sports", "days", "locations"):
            value = getattr(self, name)
            if value is None:
                value = ()
            object.__setattr__(self, name, frozenset(value))

    def where(self) -> Predicate:
        """Fold the present filters into one conjunctive predicate.

        :raises QueryError: If the date range, a filter set or the time bucket
            is invalid
        """
        start = _as_iso_date(self.start_date, "start_date")
        end = _as_iso_date(self.end_date, "end_date")
        return Predicate.all_of(
            [
                date_between(start, end),
                membership("sport", _as_values(self.sports, "sports")),
                membership("day", _as_values(self.days, "days")),
                membership("location_name", _as_values(self.locations, "locations")),
                time_bucket(_as_bucket(self.time_of_day)),
                text_search(self.search_text),
            ]
        )

    def order_by(self) -> str:
        """ORDER BY clause body, the view's default unless a sort is requested.

        :raises QueryError: If the sort key or direction is not allowed
        """
        if self.sort_key is None:
            return ", ".join(DEFAULT_ORDER)
        if self.sort_key not in VIEW_COLUMNS:
            raise QueryError(f"Cannot sort by {self.sort_key!r}")
        direction = self.sort_direction
        if isinstance(direction, str):
            direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise QueryError(f"Sort direction must be asc or desc, got {self.sort_direction!r}")
        return f"{_quote(self.sort_key)} {direction.upper()}"

    def to_sql(self) -> Tuple[str, List[Any]]:
        """Render the full SELECT and its parameter list."""
        predicate = self.where()
        sql = (
            f"SELECT * FROM {VIEW_NAME} "
            f"WHERE {predicate.sql} "
            f"ORDER BY {self.order_by()}"
        )
        return sql, list(predicate.params)


def search_schedule(db: ScheduleDatabase, query: ScheduleQuery) -> List[Dict[str, Any]]:
    """Return every schedule row matching ``query``.

    Never raises: an invalid request or a database error is logged and
    yields an empty list.
    """
    try:
        sql, params = query.to_sql()
        rows = db.fetch_all(sql, params)
    except (QueryError, duckdb.Error) as e:
        logger.error(f"Query error: {e}")
        return []

    logger.debug(f"Query returned {len(rows)} rows: {sql} {params}")
    return rows
