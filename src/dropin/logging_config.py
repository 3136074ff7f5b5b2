"""
Logging setup shared by the build and query phases.

Every module gets its logger from ``create_logger(__name__)``: colored
console output through colorlog, plus an optional plain-text log file.
The level defaults to the ``LOG_LEVEL`` environment variable.
"""

import logging
import os
import sys
from typing import Dict, List, Optional, Union

import colorlog

from dropin.exceptions import ArtifactWriteError, SourceFetchError

CONSOLE_FORMAT = (
    "%(log_color)s[%(levelname)s]%(reset)s "
    "%(blue)s[%(name)s]%(reset)s "
    "%(message)s"
)
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _resolve_level(log_level: Union[int, str, None]) -> Union[int, str]:
    if log_level is None:
        return os.getenv("LOG_LEVEL", "INFO").upper()
    if isinstance(log_level, str):
        return log_level.upper()
    return log_level


def _console_handler(level: Union[int, str]) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(CONSOLE_FORMAT, log_colors=LOG_COLORS))
    return handler


def _file_handler(
    name: str, level: Union[int, str], log_dir: Optional[str], log_file: Optional[str]
) -> logging.Handler:
    path = log_file or f"{name}.log"
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        path = os.path.join(log_dir, path)

    handler = logging.FileHandler(path)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def create_logger(
    name: Optional[str] = None,
    log_level: Union[int, str, None] = None,
    log_dir: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Create a color-coded logger, optionally also writing to a file.

    Calling this again for the same name replaces the logger's handlers
    rather than stacking duplicates.

    :param name: Logger name, usually ``__name__``
    :param log_level: Level name or number (default: LOG_LEVEL, else INFO)
    :param log_dir: Directory for the log file; implies file logging
    :param log_file: Log file name; implies file logging
    :return: Configured logger
    """
    name = name or "dropin"
    level = _resolve_level(log_level)

    logger = colorlog.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logger.addHandler(_console_handler(level))
    if log_dir or log_file:
        logger.addHandler(_file_handler(name, level, log_dir, log_file))

    return logger


def _troubleshooting_hints(e: Exception) -> List[str]:
    if isinstance(e, SourceFetchError):
        return [
            "Check that both source URLs are reachable",
            "Override DROPIN_CSV_URL / LOCATIONS_CSV_URL to use a mirror",
            "Raise FETCH_TIMEOUT if the portal is slow",
        ]
    if isinstance(e, ArtifactWriteError):
        return [
            "Check write permissions on the output directory",
            "Check free disk space",
        ]
    return ["Inspect the source feeds for a format change"]


def log_exception(
    logger: logging.Logger, e: Exception, context: Optional[Dict[str, str]] = None
) -> None:
    """
    Report a fatal build error with context and troubleshooting hints.

    :param logger: Logger instance
    :param e: Exception that stopped the build
    :param context: Optional key/value details, e.g. the output path
    """
    logger.critical("🚨 BUILD FAILED 🚨")
    logger.critical(f"Error Type: {type(e).__name__}")
    logger.critical(f"Error Details: {e}")

    for key, value in (context or {}).items():
        logger.critical(f"  {key}: {value}")

    logger.critical("Troubleshooting:")
    for i, hint in enumerate(_troubleshooting_hints(e), start=1):
        logger.critical(f"  {i}. {hint}")
    logger.critical("  The previous artifact, if any, was left in place")
