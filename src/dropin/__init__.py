"""Toronto drop-in sports schedule.

This package builds an embedded DuckDB database from the City of Toronto
drop-in program feeds and answers filtered schedule queries against it.
"""

import logging

__version__ = "1.0.0"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
