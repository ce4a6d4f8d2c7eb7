"""Extractor for the resolution-plan assignments page."""

from typing import Sequence

from bs4 import Tag

from ibbi_tracker.domain.models import PositionalRow, RecordKind

from .base import BaseExtractor
from .exceptions import MalformedRowError


class AssignmentsExtractor(BaseExtractor):
    """Reads corporate debtor / resolution professional rows.

    Page columns: debtor, resolution professional, (unused), date, status,
    and an optional sixth cell whose anchor opens the Form G document,
    usually through an ``onclick`` handler rather than its ``href``.
    """

    KIND = RecordKind.ASSIGNMENTS
    MIN_CELLS = 5
    ROW_SELECTORS = ("table tr",)
    # First row of the table is its header
    SKIP_LEADING_ROWS = 1

    def parse_row(self, cells: Sequence[Tag], position: int) -> PositionalRow:
        debtor = self.cell_text(cells[0])
        if not debtor:
            raise MalformedRowError("empty corporate debtor")

        form_g_link = self.link_of(cells[5]) if len(cells) > 5 else ""
        return PositionalRow(
            cells=(
                debtor,
                self.cell_text(cells[1]),
                self.cell_text(cells[2]),
                self.cell_text(cells[3]),
                self.cell_text(cells[4]),
                form_g_link,
            ),
            position=position,
        )
