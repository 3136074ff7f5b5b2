"""Test suite for the Toronto drop-in schedule database.

This package contains tests for the build and query phases including:
- Unit tests for individual modules
- Integration tests for complete build-then-query workflows
"""

__version__ = "1.0.0"
