"""Date-range defaults and limits for schedule requests."""

from datetime import date, timedelta
from typing import Optional, Tuple

from dropin.config import MAX_QUERY_SPAN_DAYS
from dropin.ingest.normalize import utc_today


def default_date_range(today: Optional[date] = None) -> Tuple[date, date]:
    """Today through one week from today."""
    today = today or utc_today()
    return today, today + timedelta(days=MAX_QUERY_SPAN_DAYS)


def clamp_date_range(
    start: date,
    end: date,
    changed: str = "start",
    max_days: int = MAX_QUERY_SPAN_DAYS,
) -> Tuple[date, date]:
    """Keep a user-edited range ordered and at most ``max_days`` wide.

    The bound named by ``changed`` ("start" or "end") is the one the user
    just edited; the other bound is moved to satisfy the limits.
    """
    if changed not in ("start", "end"):
        raise ValueError(f"changed must be 'start' or 'end', got {changed!r}")

    span = timedelta(days=max_days)
    if end - start > span:
        if changed == "start":
            end = start + span
        else:
            start = end - span

    if start > end:
        if changed == "start":
            end = start
        else:
            start = end

    return start, end
