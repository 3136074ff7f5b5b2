"""Field coercion and row shaping for the two source feeds.

Maps raw string records from the drop-in (fact) and locations (dimension)
feeds onto typed rows in table column order. Malformed values never abort a
row: scheduling and identity numbers fall back to 0, ages fall back to null,
and location text falls back to the empty string.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, NamedTuple, Optional

from dropin.config import HORIZON_DAYS, SENTINEL

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


class DropinRow(NamedTuple):
    """One ``dropin`` table row, fields in column order."""

    id: int
    location_id: int
    course_id: int
    course_title: str
    section: str
    age_min: Optional[int]
    age_max: Optional[int]
    date_range: str
    start_hour: int
    start_minute: int
    end_hour: int
    end_minute: int
    first_date: str
    last_date: str
    day_of_week: str


class LocationRow(NamedTuple):
    """One ``locations`` table row, fields in column order."""

    location_id: int
    location_name: str
    location_type: str
    accessibility: str
    intersection: str
    ttc_info: str
    district: str
    street_no: str
    street_name: str
    street_type: str
    street_direction: str
    postal_code: str


def parse_int(value: Optional[str]) -> int:
    """Parse the leading integer of ``value``, or 0 if there is none.

    >>> parse_int("12")
    12
    >>> parse_int("7.5")
    7
    >>> parse_int("n/a")
    0
    """
    if not value:
        return 0
    m = _LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else 0


def parse_age(value: Optional[str]) -> Optional[int]:
    """Parse an age bound, keeping a literal 0 distinct from "unspecified".

    Empty strings and the sentinel map to None, as does any value without a
    leading integer.
    """
    if value is None or value == "" or value == SENTINEL:
        return None
    m = _LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else None


def clean_value(value: Optional[str]) -> str:
    """Replace the sentinel, blank or missing values with an empty string."""
    if not value or value == SENTINEL or value.strip() == "":
        return ""
    return value


def normalize_dropin(record: Dict[str, str], row_id: int) -> DropinRow:
    """Shape a raw drop-in record into a ``dropin`` row with the given id."""
    return DropinRow(
        id=row_id,
        location_id=parse_int(record.get("Location ID")),
        course_id=parse_int(record.get("Course_ID")),
        course_title=record.get("Course Title") or "",
        section=record.get("Section") or "",
        age_min=parse_age(record.get("Age Min")),
        age_max=parse_age(record.get("Age Max")),
        date_range=record.get("Date Range") or "",
        start_hour=parse_int(record.get("Start Hour")),
        start_minute=parse_int(record.get("Start Minute")),
        end_hour=parse_int(record.get("End Hour")),
        end_minute=parse_int(record.get("End Min")),
        first_date=record.get("First Date") or "",
        last_date=record.get("Last Date") or "",
        day_of_week=record.get("DayOftheWeek") or "",
    )


def normalize_location(record: Dict[str, str]) -> Optional[LocationRow]:
    """Shape a raw location record, or return None if it has no usable id."""
    location_id = parse_int(record.get("Location ID"))
    if not location_id:
        return None

    return LocationRow(
        location_id=location_id,
        location_name=clean_value(record.get("Location Name")),
        location_type=clean_value(record.get("Location Type")),
        accessibility=clean_value(record.get("Accessibility")),
        intersection=clean_value(record.get("Intersection")),
        ttc_info=clean_value(record.get("TTC Information")),
        district=clean_value(record.get("District")),
        street_no=clean_value(record.get("Street No")),
        street_name=clean_value(record.get("Street Name")),
        street_type=clean_value(record.get("Street Type")),
        street_direction=clean_value(record.get("Street Direction")),
        postal_code=clean_value(record.get("Postal Code")),
    )


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def within_horizon(
    record: Dict[str, str], today: date, days: int = HORIZON_DAYS
) -> bool:
    """Check whether a drop-in record first occurs in [today, today + days].

    Dates are compared as ISO strings, so a record with a missing or
    non-ISO ``First Date`` falls outside the horizon.
    """
    first_date = record.get("First Date") or ""
    start = today.isoformat()
    end = (today + timedelta(days=days)).isoformat()
    return start <= first_date <= end


def filter_upcoming(
    records: Iterable[Dict[str, str]],
    today: Optional[date] = None,
    days: int = HORIZON_DAYS,
) -> List[Dict[str, str]]:
    """Keep only drop-in records that start within the build horizon."""
    today = today or utc_today()
    return [r for r in records if within_horizon(r, today, days)]
