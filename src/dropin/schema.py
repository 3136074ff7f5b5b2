"""Drop-in schedule schema: base tables, indexes and the schedule view.

Tables are declared as ordered column dictionaries, and the DDL is rendered
from them. The column order here is the artifact's column order, which the
loader relies on for positional inserts.

Tables:
- dropin: one scheduled drop-in session (fact)
- locations: one facility (dimension), keyed by location_id

View:
- sports_schedule: dropin LEFT JOIN locations with display columns
"""

from typing import Dict, List, Tuple

import duckdb

from dropin.logging_config import create_logger

logger = create_logger(__name__)

DROPIN_SCHEMA = {
    "id": {
        "type": "INTEGER",
        "primary_key": True,
        "nullable": False,
        "description": "Synthetic sequence number assigned at load time",
    },
    "location_id": {
        "type": "INTEGER",
        "nullable": False,
        "description": "Reference to locations.location_id (not enforced)",
    },
    "course_id": {
        "type": "INTEGER",
        "nullable": False,
        "description": "Source course id, shared by sections",
    },
    "course_title": {
        "type": "TEXT",
        "nullable": False,
        "description": "Activity name, e.g. Badminton",
    },
    "section": {"type": "TEXT", "nullable": True, "description": "Program section"},
    "age_min": {
        "type": "INTEGER",
        "nullable": True,
        "description": "Minimum age; null means unspecified",
    },
    "age_max": {
        "type": "INTEGER",
        "nullable": True,
        "description": "Maximum age; null means unspecified",
    },
    "date_range": {
        "type": "TEXT",
        "nullable": True,
        "description": "Free-text date range, informational only",
    },
    "start_hour": {"type": "INTEGER", "nullable": True, "description": "0-23"},
    "start_minute": {"type": "INTEGER", "nullable": True, "description": "0-59"},
    "end_hour": {"type": "INTEGER", "nullable": True, "description": "0-23"},
    "end_minute": {"type": "INTEGER", "nullable": True, "description": "0-59"},
    "first_date": {
        "type": "TEXT",
        "nullable": True,
        "description": "First occurrence, ISO date",
    },
    "last_date": {
        "type": "TEXT",
        "nullable": True,
        "description": "Last occurrence, ISO date",
    },
    "day_of_week": {
        "type": "TEXT",
        "nullable": True,
        "description": "Weekday name",
    },
}

LOCATIONS_SCHEMA = {
    "location_id": {
        "type": "INTEGER",
        "primary_key": True,
        "nullable": False,
        "description": "Source facility id",
    },
    "location_name": {"type": "TEXT", "nullable": False, "description": "Facility name"},
    "location_type": {"type": "TEXT", "nullable": True, "description": "Facility type"},
    "accessibility": {"type": "TEXT", "nullable": True, "description": "Accessibility notes"},
    "intersection": {"type": "TEXT", "nullable": True, "description": "Nearest intersection"},
    "ttc_info": {"type": "TEXT", "nullable": True, "description": "Transit directions"},
    "district": {"type": "TEXT", "nullable": True, "description": "City district"},
    "street_no": {"type": "TEXT", "nullable": True, "description": "Street number"},
    "street_name": {"type": "TEXT", "nullable": True, "description": "Street name"},
    "street_type": {"type": "TEXT", "nullable": True, "description": "Street type, e.g. Ave"},
    "street_direction": {"type": "TEXT", "nullable": True, "description": "E/W/N/S"},
    "postal_code": {"type": "TEXT", "nullable": True, "description": "Postal code"},
}

TABLES: Dict[str, Dict[str, Dict]] = {
    "dropin": DROPIN_SCHEMA,
    "locations": LOCATIONS_SCHEMA,
}

DROPIN_COLUMNS: List[str] = list(DROPIN_SCHEMA)
LOCATION_COLUMNS: List[str] = list(LOCATIONS_SCHEMA)

# (index name, table, column)
INDEXES: List[Tuple[str, str, str]] = [
    ("idx_sport", "dropin", "course_title"),
    ("idx_day", "dropin", "day_of_week"),
    ("idx_date", "dropin", "first_date"),
    ("idx_district", "locations", "district"),
]

VIEW_NAME = "sports_schedule"

VIEW_COLUMNS: List[str] = [
    "id",
    "course_id",
    "sport",
    "location_name",
    "district",
    "address",
    "intersection",
    "accessibility",
    "ttc_info",
    "day",
    "time",
    "start_hour",
    "date",
    "age_range",
]

# Location text columns are coalesced so unmatched facts render as empty.
SPORTS_SCHEDULE_SQL = f"""
    CREATE VIEW {VIEW_NAME} AS
    SELECT
      d.id,
      d.course_id,
      d.course_title AS sport,
      COALESCE(l.location_name, '') AS location_name,
      COALESCE(l.district, '') AS district,
      TRIM(
        COALESCE(l.street_no || ' ', '') ||
        COALESCE(l.street_name || ' ', '') ||
        COALESCE(l.street_type || ' ', '') ||
        COALESCE(l.street_direction, '')
      ) AS address,
      COALESCE(l.intersection, '') AS intersection,
      COALESCE(l.accessibility, '') AS accessibility,
      COALESCE(l.ttc_info, '') AS ttc_info,
      d.day_of_week AS "day",
      printf('%02d:%02d', d.start_hour, d.start_minute) || ' - ' ||
        printf('%02d:%02d', d.end_hour, d.end_minute) AS "time",
      d.start_hour,
      d.first_date AS "date",
      CASE
        WHEN d.age_min IS NULL AND d.age_max IS NULL
        THEN 'All'
        WHEN d.age_min = 0 AND (d.age_max IS NULL OR d.age_max = 0)
        THEN 'All'
        WHEN d.age_max IS NULL OR d.age_max = 0
        THEN CAST(d.age_min AS VARCHAR) || '+'
        ELSE CAST(d.age_min AS VARCHAR) || '-' || CAST(d.age_max AS VARCHAR)
      END AS age_range
    FROM dropin d
    LEFT JOIN locations l ON d.location_id = l.location_id
    ORDER BY d.first_date, d.start_hour
"""


def column_ddl(name: str, spec: Dict) -> str:
    """Render one column definition from its schema entry."""
    parts = [name, spec["type"]]
    if spec.get("primary_key"):
        parts.append("PRIMARY KEY")
    elif not spec.get("nullable", True):
        parts.append("NOT NULL")
    return " ".join(parts)


def table_ddl(table: str) -> str:
    """Render the CREATE TABLE statement for a base table."""
    columns = ",\n  ".join(
        column_ddl(name, spec) for name, spec in TABLES[table].items()
    )
    return f"CREATE TABLE {table} (\n  {columns}\n)"


def create_tables(con: duckdb.DuckDBPyConnection) -> None:
    """Create the dropin and locations base tables."""
    for table in TABLES:
        con.execute(table_ddl(table))
        logger.debug(f"   Created table {table}")


def create_indexes(con: duckdb.DuckDBPyConnection) -> None:
    """Create indexes for the sport, day, date and district filters."""
    for index_name, table, column in INDEXES:
        con.execute(f"CREATE INDEX {index_name} ON {table}({column})")
        logger.debug(f"   Created index {index_name} on {table}({column})")


def create_view(con: duckdb.DuckDBPyConnection) -> None:
    """Create the sports_schedule view."""
    con.execute(SPORTS_SCHEDULE_SQL)
    logger.debug(f"   Created view {VIEW_NAME}")
