"""Values for populating the schedule's selection controls."""

from typing import List, NamedTuple

from dropin.artifact import ScheduleDatabase
from dropin.config import WEEKDAYS
from dropin.schema import VIEW_NAME


class FilterOptions(NamedTuple):
    sports: List[str]
    locations: List[str]
    days: List[str]


def filter_options(db: ScheduleDatabase) -> FilterOptions:
    """Distinct sports, distinct non-empty location names, and the weekdays."""
    sports = db.fetch_column(f"SELECT DISTINCT sport FROM {VIEW_NAME} ORDER BY sport")
    locations = db.fetch_column(
        f"""
        SELECT DISTINCT location_name
        FROM {VIEW_NAME}
        WHERE location_name IS NOT NULL AND location_name != ''
        ORDER BY location_name
        """
    )
    return FilterOptions(sports=sports, locations=locations, days=list(WEEKDAYS))
