"""Build the drop-in schedule database.

Downloads the drop-in and locations feeds, keeps the sessions that start
within the build horizon, and exports a DuckDB artifact containing the
``dropin`` and ``locations`` tables, their indexes and the
``sports_schedule`` view.
"""

import time
from dataclasses import dataclass
from datetime import date
from typing import Optional

import duckdb
import requests

from dropin.artifact import artifact_stats, write_artifact
from dropin.config import DB_PATH, DROPIN_CSV_URL, HORIZON_DAYS, LOCATIONS_CSV_URL
from dropin.exceptions import BuildError
from dropin.ingest.csv_parser import parse_csv
from dropin.ingest.fetch import fetch_sources
from dropin.ingest.normalize import filter_upcoming, utc_today
from dropin.loader import insert_dropin_records, insert_location_records, number_rows
from dropin.logging_config import create_logger, log_exception
from dropin.schema import create_indexes, create_tables, create_view

logger = create_logger(__name__)


@dataclass
class BuildResult:
    """Summary of one completed build."""

    path: str
    dropin_fetched: int
    dropin_kept: int
    locations_fetched: int
    locations_inserted: int
    records: int
    size_bytes: int
    duration: float


class Build:
    """Run the one-shot batch build of the schedule database.

    Stages run strictly in sequence: fetch, parse, filter, schema, load,
    indexes, view, export. A failure at any stage aborts the build without
    touching the previous artifact.
    """

    def __init__(
        self,
        output_path: str = DB_PATH,
        dropin_url: str = DROPIN_CSV_URL,
        locations_url: str = LOCATIONS_CSV_URL,
        today: Optional[date] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.output_path = output_path
        self.dropin_url = dropin_url
        self.locations_url = locations_url
        self.today = today or utc_today()
        self.session = session

    def build_from_text(self, dropin_csv: str, locations_csv: str) -> BuildResult:
        """Parse, filter and load already-downloaded CSV text.

        :raises BuildError: If the artifact cannot be produced
        """
        start_time = time.time()

        logger.info("📊 Parsing data...")
        dropin_records = parse_csv(dropin_csv)
        location_records = parse_csv(locations_csv)

        upcoming = filter_upcoming(dropin_records, self.today, HORIZON_DAYS)
        logger.info(
            f"✂️  Filtered from {len(dropin_records)} to {len(upcoming)} records "
            f"(first date within {HORIZON_DAYS} days of {self.today.isoformat()})"
        )
        dropin_rows = number_rows(upcoming)

        def populate(con: duckdb.DuckDBPyConnection):
            logger.info("🗄️  Creating database schema...")
            create_tables(con)

            logger.info("💾 Inserting data...")
            insert_dropin_records(con, dropin_rows)
            locations = insert_location_records(con, location_records)

            logger.info("🔍 Creating indexes...")
            create_indexes(con)
            create_view(con)
            return locations

        try:
            locations = write_artifact(populate, self.output_path)
            stats = artifact_stats(self.output_path)
        except BuildError:
            raise
        except Exception as e:
            raise BuildError(f"Database build failed: {e}") from e

        result = BuildResult(
            path=self.output_path,
            dropin_fetched=len(dropin_records),
            dropin_kept=len(dropin_rows),
            locations_fetched=len(location_records),
            locations_inserted=locations.inserted,
            records=stats.records,
            size_bytes=stats.size_bytes,
            duration=time.time() - start_time,
        )

        logger.info("✅ Database built successfully!")
        logger.info(f"   Records: {result.records}")
        logger.info(f"   Size: {stats.size_kb:.2f} KB")
        logger.info(f"   Location: {result.path}")
        return result

    def run(self) -> BuildResult:
        """Fetch both feeds and build the artifact.

        :raises BuildError: If fetching or writing fails
        """
        logger.info("🏗️  Building sports database...")
        try:
            dropin_csv, locations_csv = fetch_sources(
                self.dropin_url, self.locations_url, session=self.session
            )
            return self.build_from_text(dropin_csv, locations_csv)
        except BuildError as e:
            log_exception(logger, e, {"output": self.output_path})
            raise


if __name__ == "__main__":
    try:
        Build().run()
    except BuildError as e:
        logger.error(f"Build failed: {e}")
        exit(1)
