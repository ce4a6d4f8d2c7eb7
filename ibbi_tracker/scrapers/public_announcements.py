"""Extractor for the public announcements page."""

from typing import Sequence

from bs4 import Tag

from ibbi_tracker.domain.models import PositionalRow, RecordKind

from .base import BaseExtractor
from .exceptions import MalformedRowError


class PublicAnnouncementsExtractor(BaseExtractor):
    """Reads titled-link / category / date rows."""

    KIND = RecordKind.PUBLIC_ANNOUNCEMENTS
    MIN_CELLS = 3

    def parse_row(self, cells: Sequence[Tag], position: int) -> PositionalRow:
        title, link = self.title_and_link(cells[0])
        if not title:
            raise MalformedRowError("empty title")
        return PositionalRow(
            cells=(title, self.cell_text(cells[1]), self.cell_text(cells[2]), link),
            position=position,
        )
