"""Ingest package: source download, CSV parsing and normalization.

This package turns the two Toronto open-data feeds into rows ready for
the schedule database.
"""
