"""Base extractor with shared table-walking functionality.

This module provides the abstract base class for the per-page extractors,
along with shared helpers for locating table rows, reading cell text and
pulling a title plus link out of a cell.
"""

import re
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from ibbi_tracker.domain.models import PositionalRow, RecordKind
from ibbi_tracker.logging import get_logger

from .exceptions import MalformedRowError, ScraperError
from .fetcher import Fetcher
from .links import find_link, resolve_link

logger = get_logger(__name__, component="extractor")


class BaseExtractor(ABC):
    """Base class for all page extractors.

    Subclasses set KIND, MIN_CELLS and optionally ROW_SELECTORS and
    SKIP_LEADING_ROWS, and implement parse_row().

    Attributes:
        fetcher: Shared Fetcher
        url: Page URL for this source
        origin: Site origin used to absolutize relative links
    """

    KIND: RecordKind
    MIN_CELLS: int = 1
    # Tried in order; the first selector that matches any row wins
    ROW_SELECTORS: Tuple[str, ...] = ("table tbody tr", "table tr")
    SKIP_LEADING_ROWS: int = 0

    def __init__(self, fetcher: Fetcher, url: str, origin: str) -> None:
        self.fetcher = fetcher
        self.url = url
        self.origin = origin

    @property
    def name(self) -> str:
        return self.KIND.value

    def extract(self) -> List[PositionalRow]:
        """Fetch the page and extract its rows.

        Never raises: fetch or parse failures are logged and degrade to an
        empty list so one failing page cannot break the aggregate scrape.

        Returns:
            Positional rows in page order
        """
        logger.info(
            f"Fetching {self.name} page",
            extra={"event": "extractor.started", "extractor": self.name, "url": self.url},
        )

        try:
            html = self.fetcher.fetch(self.url)
            rows = self.parse(html)
        except ScraperError as e:
            logger.warning(
                f"Failed to scrape {self.name}: {e}",
                extra={
                    "event": "extractor.failed",
                    "extractor": self.name,
                    "error_type": type(e).__name__,
                    "url": self.url,
                },
            )
            return []
        except Exception as e:
            logger.error(
                f"Unexpected error scraping {self.name}: {e}",
                extra={
                    "event": "extractor.failed",
                    "extractor": self.name,
                    "error_type": type(e).__name__,
                    "url": self.url,
                },
                exc_info=True,
            )
            return []

        logger.info(
            f"Parsed {len(rows)} {self.name} rows",
            extra={"event": "extractor.completed", "extractor": self.name, "count": len(rows)},
        )
        return rows

    def parse(self, html: str) -> List[PositionalRow]:
        """Parse a fetched document into positional rows.

        Rows with too few cells or an empty identifying field are dropped
        silently; only the discarded count is logged.
        """
        soup = BeautifulSoup(html, "html.parser")
        table_rows = self.locate_rows(soup)

        rows: List[PositionalRow] = []
        discarded = 0
        for position, table_row in enumerate(table_rows):
            if position < self.SKIP_LEADING_ROWS:
                continue
            cells = table_row.find_all("td")
            try:
                if len(cells) < self.MIN_CELLS:
                    raise MalformedRowError(
                        f"expected at least {self.MIN_CELLS} cells, got {len(cells)}"
                    )
                rows.append(self.parse_row(cells, position))
            except MalformedRowError:
                discarded += 1

        logger.debug(
            f"Found {len(table_rows)} table rows",
            extra={
                "extractor": self.name,
                "table_rows": len(table_rows),
                "kept": len(rows),
                "discarded": discarded,
            },
        )
        return rows

    def locate_rows(self, soup: BeautifulSoup) -> List[Tag]:
        """Find table rows using the first selector that yields any."""
        for selector in self.ROW_SELECTORS:
            found = soup.select(selector)
            if found:
                return found
        return []

    @abstractmethod
    def parse_row(self, cells: Sequence[Tag], position: int) -> PositionalRow:
        """Turn one row's cells into a PositionalRow.

        Args:
            cells: The row's ``td`` elements (at least MIN_CELLS)
            position: Row index within the located rows

        Raises:
            MalformedRowError: If the identifying field is empty
        """

    @staticmethod
    def cell_text(cell: Tag) -> str:
        """Visible text of a cell with whitespace collapsed."""
        return re.sub(r"\s+", " ", cell.get_text(" ", strip=True)).strip()

    def title_and_link(self, cell: Tag) -> Tuple[str, str]:
        """Title text and absolute link of a cell holding an anchor.

        The anchor's text is preferred over the full cell text.
        """
        anchor = cell.find("a")
        title = self.cell_text(anchor) if anchor is not None else ""
        if not title:
            title = self.cell_text(cell)
        return title, resolve_link(self.origin, find_link(cell))

    def link_of(self, cell: Tag) -> str:
        return resolve_link(self.origin, find_link(cell))
