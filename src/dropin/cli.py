#!/usr/bin/env python3
"""Command-line entry point for building and querying the schedule database.

Examples:
    dropin build --output public/sports.db
    dropin options
    dropin query --start 2025-06-01 --end 2025-06-07 --sport Badminton --time evening
"""

import argparse
import sys

from dotenv import load_dotenv

# Environment overrides must be in place before the config module is read
load_dotenv()

import pandas as pd  # noqa: E402

from dropin.config import DB_PATH, validate_config  # noqa: E402
from dropin.exceptions import (  # noqa: E402
    ArtifactLoadError,
    BuildError,
    ConfigurationError,
)
from dropin.logging_config import create_logger  # noqa: E402
from dropin.query import (  # noqa: E402
    ScheduleQuery,
    default_date_range,
    filter_options,
    search_schedule,
)
from dropin.artifact import ScheduleDatabase  # noqa: E402
from dropin.schema import VIEW_COLUMNS  # noqa: E402

logger = create_logger(__name__)

DISPLAY_COLUMNS = ["sport", "location_name", "address", "day", "time", "date", "age_range"]


def cmd_build(args: argparse.Namespace) -> int:
    from dropin.ingest.run import Build

    try:
        validate_config()
        Build(output_path=args.output).run()
    except (ConfigurationError, BuildError) as e:
        logger.error(f"Build failed: {e}")
        return 1
    return 0


def cmd_options(args: argparse.Namespace) -> int:
    try:
        with ScheduleDatabase.open(args.db) as db:
            options = filter_options(db)
    except ArtifactLoadError as e:
        logger.error(str(e))
        return 1

    print(f"Sports ({len(options.sports)}):")
    for sport in options.sports:
        print(f"  {sport}")
    print(f"\nLocations ({len(options.locations)}):")
    for location in options.locations:
        print(f"  {location}")
    print(f"\nDays: {', '.join(options.days)}")
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    default_start, default_end = default_date_range()
    query = ScheduleQuery(
        start_date=args.start or default_start,
        end_date=args.end or default_end,
        sports=args.sport,
        days=args.day,
        locations=args.location,
        time_of_day=args.time,
        search_text=args.search,
        sort_key=args.sort,
        sort_direction="desc" if args.desc else "asc",
    )

    try:
        with ScheduleDatabase.open(args.db) as db:
            rows = search_schedule(db, query)
    except ArtifactLoadError as e:
        logger.error(str(e))
        return 1

    if not rows:
        print("No matching drop-in sessions.")
        return 0

    df = pd.DataFrame(rows, columns=VIEW_COLUMNS)
    shown = df if args.all_columns else df[DISPLAY_COLUMNS]
    if args.limit:
        shown = shown.head(args.limit)
    print(shown.to_string(index=False))
    print(f"\n{len(df)} sessions")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dropin",
        description="Toronto drop-in sports schedule database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Download the feeds and build the database")
    build.add_argument("--output", default=DB_PATH, help="Artifact path (default: %(default)s)")
    build.set_defaults(func=cmd_build)

    options = subparsers.add_parser("options", help="List filter values")
    options.add_argument("--db", default=DB_PATH, help="Artifact path (default: %(default)s)")
    options.set_defaults(func=cmd_options)

    query = subparsers.add_parser("query", help="Search the schedule")
    query.add_argument("--db", default=DB_PATH, help="Artifact path (default: %(default)s)")
    query.add_argument("--start", help="First date, YYYY-MM-DD (default: today)")
    query.add_argument("--end", help="Last date, YYYY-MM-DD (default: a week from today)")
    query.add_argument("--sport", action="append", default=[], help="Repeatable")
    query.add_argument("--day", action="append", default=[], help="Repeatable")
    query.add_argument("--location", action="append", default=[], help="Repeatable")
    query.add_argument("--time", choices=["morning", "afternoon", "evening"])
    query.add_argument("--search", default="", help="Text in sport, location or address")
    query.add_argument("--sort", choices=VIEW_COLUMNS, help="Sort column")
    query.add_argument("--desc", action="store_true", help="Sort descending")
    query.add_argument("--limit", type=int, default=50, help="Rows to print, 0 for all")
    query.add_argument("--all-columns", action="store_true")
    query.set_defaults(func=cmd_query)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
