"""Read-only querying of the schedule artifact."""

from .dates import clamp_date_range, default_date_range
from .engine import Predicate, ScheduleQuery, TimeOfDay, membership, search_schedule
from .options import FilterOptions, filter_options
