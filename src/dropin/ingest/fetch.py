"""Download the two source CSV feeds.

Both requests are issued concurrently and awaited together. There is no
partial-result handling: if either download fails the build is aborted.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

import requests

from dropin.config import DROPIN_CSV_URL, FETCH_TIMEOUT, LOCATIONS_CSV_URL
from dropin.exceptions import SourceFetchError
from dropin.logging_config import create_logger

logger = create_logger(__name__)


def fetch_text(
    session: requests.Session, url: str, timeout: float = FETCH_TIMEOUT
) -> str:
    """Fetch one CSV resource and return its decoded text.

    :param session: HTTP session to issue the request with
    :param url: Resource URL
    :param timeout: Request timeout in seconds
    :raises SourceFetchError: On any transport failure or non-2xx response
    """
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise SourceFetchError(f"Failed to fetch {url}: {e}") from e

    # Open-data exports are UTF-8, sometimes with a byte order mark
    text = response.content.decode("utf-8-sig", errors="replace")
    logger.info(f"   Downloaded {len(response.content) / 1024:.1f} KB from {url}")
    return text


def fetch_sources(
    dropin_url: str = DROPIN_CSV_URL,
    locations_url: str = LOCATIONS_CSV_URL,
    session: Optional[requests.Session] = None,
    timeout: float = FETCH_TIMEOUT,
) -> Tuple[str, str]:
    """Fetch the drop-in and locations feeds concurrently.

    :return: (drop-in CSV text, locations CSV text)
    :raises SourceFetchError: If either download fails
    """
    logger.info("📥 Downloading CSVs...")
    owns_session = session is None
    session = session or requests.Session()

    try:
        with ThreadPoolExecutor(max_workers=2) as executor:
            dropin_future = executor.submit(fetch_text, session, dropin_url, timeout)
            locations_future = executor.submit(
                fetch_text, session, locations_url, timeout
            )
            return dropin_future.result(), locations_future.result()
    finally:
        if owns_session:
            session.close()
