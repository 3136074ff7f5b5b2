"""Configuration module for project settings and environment variables.

Source feed locations, the artifact path and build policy constants.
Every value can be overridden through the environment (or a ``.env`` file
loaded by the CLI).
"""

import os

from dropin.exceptions import ConfigurationError

# get the local root directory
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

# Toronto Open Data: "Registered Programs and Drop In Courses Offering"
_CKAN_DATASET = (
    "https://ckan0.cf.opendata.inter.prod-toronto.ca/dataset/"
    "1a5be46a-4039-48cd-a2d2-8e702abf9516/resource"
)

DROPIN_CSV_URL = os.getenv(
    "DROPIN_CSV_URL",
    f"{_CKAN_DATASET}/90f7fffe-658b-4a79-bce3-a91c1b5886de/download/drop-in.csv",
)
LOCATIONS_CSV_URL = os.getenv(
    "LOCATIONS_CSV_URL",
    f"{_CKAN_DATASET}/f4db24c4-1270-40e3-9c2d-44d7daf4f872/download/locations.csv",
)

# Artifact consumed by the schedule UI
PUBLIC_DIR = os.path.join(ROOT_DIR, "public")
DB_PATH = os.getenv("DB_PATH", os.path.join(PUBLIC_DIR, "sports.db"))

# Seconds per source request
try:
    FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "60"))
except ValueError as e:
    raise ConfigurationError(f"FETCH_TIMEOUT must be a number: {e}") from e

# Only facts whose first date falls within this many days of the build are kept.
HORIZON_DAYS = 30

# Widest date range the schedule UI lets a user pick
MAX_QUERY_SPAN_DAYS = 7

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Textual placeholder the source feeds use for "no value"
SENTINEL = "None"


def validate_config():
    """
    Validate critical configuration parameters.

    :raises ConfigurationError: If configuration is invalid
    """
    for name, url in (
        ("DROPIN_CSV_URL", DROPIN_CSV_URL),
        ("LOCATIONS_CSV_URL", LOCATIONS_CSV_URL),
    ):
        if not url:
            raise ConfigurationError(f"Missing source URL: {name}")
        if not url.startswith(("http://", "https://")):
            raise ConfigurationError(f"{name} is not an HTTP(S) URL: {url}")

    if not DB_PATH:
        raise ConfigurationError("Database path (DB_PATH) is not configured")

    if FETCH_TIMEOUT <= 0:
        raise ConfigurationError(
            f"FETCH_TIMEOUT must be positive, got {FETCH_TIMEOUT}"
        )
