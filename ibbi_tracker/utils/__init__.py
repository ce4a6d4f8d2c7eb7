"""Utility functions for time handling."""

from .timestamps import (
    calendar_date,
    ensure_utc,
    epoch_millis,
    format_timestamp,
    parse_iso_datetime,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
    "calendar_date",
    "epoch_millis",
]
