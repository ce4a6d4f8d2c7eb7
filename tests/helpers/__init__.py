"""Test helper utilities for IBBI tracker tests."""

from .fixture_pages import (
    ANNOUNCEMENTS_PAGE,
    ASSIGNMENTS_PAGE,
    EMPTY_PAGE,
    ORIGIN,
    PUBLIC_ANNOUNCEMENTS_PAGE,
    SITE,
    FixtureFetcher,
)

__all__ = [
    "FixtureFetcher",
    "ORIGIN",
    "SITE",
    "ASSIGNMENTS_PAGE",
    "ANNOUNCEMENTS_PAGE",
    "PUBLIC_ANNOUNCEMENTS_PAGE",
    "EMPTY_PAGE",
]
