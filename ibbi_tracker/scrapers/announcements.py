"""Extractor for the "what's new" announcements page."""

from typing import Sequence

from bs4 import Tag

from ibbi_tracker.domain.models import PositionalRow, RecordKind

from .base import BaseExtractor
from .exceptions import MalformedRowError


class AnnouncementsExtractor(BaseExtractor):
    """Reads date / titled-link rows."""

    KIND = RecordKind.ANNOUNCEMENTS
    MIN_CELLS = 2

    def parse_row(self, cells: Sequence[Tag], position: int) -> PositionalRow:
        title, link = self.title_and_link(cells[1])
        if not title:
            raise MalformedRowError("empty title")
        return PositionalRow(cells=(self.cell_text(cells[0]), title, link), position=position)
