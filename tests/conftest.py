"""Pytest configuration and shared fixtures for the drop-in schedule tests.

This module provides fixtures for:
- Sample drop-in and locations feeds (as DataFrames and CSV text)
- DuckDB connections with the schedule schema
- Built database artifacts and read-only query handles
- Temporary file management
"""

import tempfile
from datetime import date
from pathlib import Path
from typing import Generator

import duckdb
import pandas as pd
import pytest

from dropin.artifact import ScheduleDatabase
from dropin.ingest.run import Build
from dropin.schema import create_indexes, create_tables, create_view

# Build date used throughout; the horizon runs 2025-06-01..2025-07-01.
BUILD_DATE = date(2025, 6, 1)

DROPIN_HEADERS = [
    "_id",
    "Location ID",
    "Course_ID",
    "Course Title",
    "Section",
    "Age Min",
    "Age Max",
    "Date Range",
    "Start Hour",
    "Start Minute",
    "End Hour",
    "End Min",
    "First Date",
    "Last Date",
    "DayOftheWeek",
]

LOCATION_HEADERS = [
    "_id",
    "Location ID",
    "Location Name",
    "Location Type",
    "Accessibility",
    "Intersection",
    "TTC Information",
    "District",
    "Street No",
    "Street Name",
    "Street Type",
    "Street Direction",
    "Postal Code",
]


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def build_date() -> date:
    """Date the sample builds are run as of."""
    return BUILD_DATE


@pytest.fixture(scope="function")
def sample_dropin_data() -> pd.DataFrame:
    """Generate a sample drop-in feed.

    Rows 6 and 7 fall outside the 30-day build horizon; row 4 refers to a
    location that is not in the locations feed.
    """
    rows = [
        # id, loc, course, title, section, amin, amax, range, sh, sm, eh, em, first, last, day
        ["1", "1", "1001", "Badminton", "Sports - Drop-In", "", "", "Jun 2 to Jun 30",
         "18", "0", "", "", "2025-06-02", "2025-06-30", "Monday"],
        ["2", "2", "1002", "Basketball", "Sports - Drop-In", "13", "17", "Jun 3 to Jun 24",
         "12", "0", "14", "30", "2025-06-03", "2025-06-24", "Tuesday"],
        ["3", "1", "1003", "Pickleball", "Sports - Drop-In", "60", "None", "Jun 7 to Jun 28",
         "6", "30", "8", "0", "2025-06-07", "2025-06-28", "Saturday"],
        ["4", "99", "1004", "Volleyball", "Sports - Drop-In", "0", "0", "Jun 4 to Jun 25",
         "22", "0", "23", "0", "2025-06-04", "2025-06-25", "Wednesday"],
        ["5", "2", "1005", "Lane Swim", "Swimming - Drop-In", "None", "", "Jun 8 to Jun 29",
         "9", "0", "10", "0", "2025-06-08", "2025-06-29", "Sunday"],
        ["6", "1", "1006", "Table Tennis", "Sports - Drop-In", "", "", "May 20 to Jun 10",
         "10", "0", "11", "0", "2025-05-20", "2025-06-10", "Tuesday"],
        ["7", "2", "1007", "Ice Hockey", "Skating - Drop-In", "", "", "Aug 15 to Sep 5",
         "19", "0", "20", "0", "2025-08-15", "2025-09-05", "Friday"],
        ["8", "3", "1001", "Badminton", "Sports - Drop-In", "5", "12", "Jun 1 to Jun 29",
         "17", "0", "18", "15", "2025-06-01", "2025-06-29", "Sunday"],
    ]
    return pd.DataFrame(rows, columns=DROPIN_HEADERS)


@pytest.fixture(scope="function")
def sample_locations_data() -> pd.DataFrame:
    """Generate a sample locations feed with duplicates and invalid ids."""
    rows = [
        ["1", "1", "Metro Hall", "Community Centre", "Fully Accessible",
         "King St W and John St", "510 Spadina streetcar", "Toronto and East York",
         "55", "John", "St", "None", "M5V 3C6"],
        ["2", "2", "Malvern CRC", "Community Recreation Centre",
         "Partially Accessible, elevator to pool", "Neilson Rd and Sewells Rd",
         "None", "Scarborough", "30", "Sewells", "Rd", "", "M1B 3G5"],
        ["3", "1", "Duplicate Metro Hall", "Community Centre", "", "", "", "Etobicoke",
         "1", "Other", "Ave", "", ""],
        ["4", "0", "No Id Arena", "Arena", "", "", "", "North York", "", "", "", "", ""],
        ["5", "abc", "Bad Id Pool", "Pool", "", "", "", "North York", "", "", "", "", ""],
        ["6", "3", "Wallace Emerson CC", "Community Centre", "   ", "Dufferin St and Wallace Ave",
         "29 Dufferin bus", "None", "1260", "Dufferin", "St", "", "M6H 4C5"],
    ]
    return pd.DataFrame(rows, columns=LOCATION_HEADERS)


@pytest.fixture(scope="function")
def dropin_csv_text(sample_dropin_data: pd.DataFrame) -> str:
    """Drop-in feed as raw CSV text."""
    return sample_dropin_data.to_csv(index=False)


@pytest.fixture(scope="function")
def locations_csv_text(sample_locations_data: pd.DataFrame) -> str:
    """Locations feed as raw CSV text."""
    return sample_locations_data.to_csv(index=False)


# ============================================================================
# Temporary File Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for testing.

    Yields:
        Path to temporary directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================================
# DuckDB Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def duckdb_connection() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """Provide an in-memory DuckDB connection for testing.

    Yields:
        DuckDB connection object
    """
    con = duckdb.connect(":memory:")
    yield con
    con.close()


@pytest.fixture(scope="function")
def duckdb_with_schema(duckdb_connection: duckdb.DuckDBPyConnection) -> duckdb.DuckDBPyConnection:
    """Provide a DuckDB connection with the schedule tables, indexes and view."""
    create_tables(duckdb_connection)
    create_indexes(duckdb_connection)
    create_view(duckdb_connection)
    return duckdb_connection


@pytest.fixture(scope="function")
def built_db_path(
    temp_dir: Path, dropin_csv_text: str, locations_csv_text: str, build_date: date
) -> Path:
    """Build the sample feeds into an artifact and return its path."""
    db_path = temp_dir / "public" / "sports.db"
    Build(output_path=str(db_path), today=build_date).build_from_text(
        dropin_csv_text, locations_csv_text
    )
    return db_path


@pytest.fixture(scope="function")
def schedule_db(built_db_path: Path) -> Generator[ScheduleDatabase, None, None]:
    """Provide a read-only handle on the sample artifact.

    Yields:
        Open ScheduleDatabase
    """
    db = ScheduleDatabase.open(str(built_db_path))
    yield db
    db.close()
