"""IBBI case and notice tracker.

Scrapes regulatory assignment and announcement tables, normalizes them into
canonical records and persists them as quote-aware delimited text files.
"""

__version__ = "1.0.0"
