"""Page fetching and table-row extraction for the regulator's site.

This package provides:
- Fetcher: browser-emulating HTTP client (fetcher.Fetcher)
- One extractor per source page:
  - assignments.AssignmentsExtractor
  - announcements.AnnouncementsExtractor
  - public_announcements.PublicAnnouncementsExtractor
- Link recovery helpers (links)

The aggregate service that runs all extractors concurrently lives in
``ibbi_tracker.scrapers.service``:
    from ibbi_tracker.scrapers.service import IBBIScraper
    result = IBBIScraper.from_config(app_config).get_all_data()

Exception handling:
    from ibbi_tracker.scrapers.exceptions import ScraperError, NetworkError, FetchTimeoutError, HTTPStatusError
"""

from .announcements import AnnouncementsExtractor
from .assignments import AssignmentsExtractor
from .base import BaseExtractor
from .exceptions import (
    FetchTimeoutError,
    HTTPStatusError,
    MalformedRowError,
    NetworkError,
    ScraperError,
)
from .fetcher import Fetcher
from .links import extract_handler_url, find_link, resolve_link
from .public_announcements import PublicAnnouncementsExtractor

__all__ = [
    # Fetching
    "Fetcher",
    # Extractors
    "BaseExtractor",
    "AssignmentsExtractor",
    "AnnouncementsExtractor",
    "PublicAnnouncementsExtractor",
    # Links
    "extract_handler_url",
    "find_link",
    "resolve_link",
    # Exceptions
    "ScraperError",
    "NetworkError",
    "FetchTimeoutError",
    "HTTPStatusError",
    "MalformedRowError",
]
