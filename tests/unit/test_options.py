"""Unit tests for filter options and date-range helpers."""

from datetime import date

import pytest

from dropin.query import clamp_date_range, default_date_range, filter_options


@pytest.mark.unit
@pytest.mark.duckdb
class TestFilterOptions:
    """Test filter-option discovery."""

    def test_sports_distinct_and_sorted(self, schedule_db):
        options = filter_options(schedule_db)

        assert options.sports == ["Badminton", "Basketball", "Lane Swim", "Pickleball", "Volleyball"]

    def test_locations_exclude_empty(self, schedule_db):
        options = filter_options(schedule_db)

        assert options.locations == ["Malvern CRC", "Metro Hall", "Wallace Emerson CC"]

    def test_days_fixed_enumeration(self, schedule_db):
        options = filter_options(schedule_db)

        assert options.days == [
            "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
        ]


@pytest.mark.unit
class TestDateRanges:
    """Test default and clamped date ranges."""

    def test_default_range_is_one_week(self):
        assert default_date_range(date(2025, 6, 1)) == (date(2025, 6, 1), date(2025, 6, 8))

    def test_range_within_limit_unchanged(self):
        start, end = date(2025, 6, 1), date(2025, 6, 5)

        assert clamp_date_range(start, end, "start") == (start, end)

    def test_start_change_moves_end(self):
        assert clamp_date_range(date(2025, 6, 1), date(2025, 6, 20), "start") == (
            date(2025, 6, 1),
            date(2025, 6, 8),
        )

    def test_end_change_moves_start(self):
        assert clamp_date_range(date(2025, 6, 1), date(2025, 6, 20), "end") == (
            date(2025, 6, 13),
            date(2025, 6, 20),
        )

    def test_start_after_end(self):
        assert clamp_date_range(date(2025, 6, 10), date(2025, 6, 5), "start") == (
            date(2025, 6, 10),
            date(2025, 6, 10),
        )
        assert clamp_date_range(date(2025, 6, 10), date(2025, 6, 5), "end") == (
            date(2025, 6, 5),
            date(2025, 6, 5),
        )

    def test_invalid_changed(self):
        with pytest.raises(ValueError):
            clamp_date_range(date(2025, 6, 1), date(2025, 6, 2), "middle")
