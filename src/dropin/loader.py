"""Insert normalized records into the base tables.

Fact rows are numbered densely in input order and inserted as-is. Location
rows are deduplicated on location_id with the first occurrence winning.
"""

from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

import duckdb

from dropin.ingest.normalize import (
    DropinRow,
    LocationRow,
    normalize_dropin,
    normalize_location,
)
from dropin.logging_config import create_logger
from dropin.schema import DROPIN_COLUMNS, LOCATION_COLUMNS

logger = create_logger(__name__)


class LocationLoadResult(NamedTuple):
    inserted: int
    skipped_invalid: int
    skipped_duplicate: int


def _insert_sql(table: str, columns: Sequence[str]) -> str:
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"


def number_rows(records: Iterable[Dict[str, str]]) -> List[DropinRow]:
    """Normalize drop-in records, assigning ids 0, 1, 2, ... in input order."""
    return [normalize_dropin(record, row_id) for row_id, record in enumerate(records)]


def unique_locations(
    records: Iterable[Dict[str, str]],
) -> Tuple[List[LocationRow], LocationLoadResult]:
    """Normalize location records, keeping the first row per location_id.

    :return: (rows to insert, LocationLoadResult)
    """
    seen = set()
    rows: List[LocationRow] = []
    invalid = 0
    duplicate = 0

    for record in records:
        row = normalize_location(record)
        if row is None:
            invalid += 1
            continue
        if row.location_id in seen:
            duplicate += 1
            continue
        seen.add(row.location_id)
        rows.append(row)

    return rows, LocationLoadResult(len(rows), invalid, duplicate)


def insert_dropin_records(
    con: duckdb.DuckDBPyConnection, rows: Sequence[DropinRow]
) -> int:
    """Insert every drop-in row; no deduplication is applied.

    :return: Number of rows inserted
    """
    if rows:
        con.executemany(_insert_sql("dropin", DROPIN_COLUMNS), [tuple(r) for r in rows])
    logger.info(f"   Inserted {len(rows)} drop-in rows")
    return len(rows)


def insert_location_records(
    con: duckdb.DuckDBPyConnection, records: Iterable[Dict[str, str]]
) -> LocationLoadResult:
    """Normalize and insert location records, first occurrence per id wins.

    Records whose id is zero or unparseable are skipped entirely.
    """
    rows, result = unique_locations(records)
    if rows:
        con.executemany(
            _insert_sql("locations", LOCATION_COLUMNS), [tuple(r) for r in rows]
        )

    logger.info(
        f"   Inserted {result.inserted} locations "
        f"(skipped {result.skipped_invalid} without id, "
        f"{result.skipped_duplicate} duplicates)"
    )
    return result
