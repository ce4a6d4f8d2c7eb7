"""Reader for the published CSV export of the hand-maintained spreadsheet.

Staff keep a spreadsheet of assignments whose columns are renamed and
reordered from time to time. Its CSV export is fetched with the shared
Fetcher, decoded into rows keyed by header, and resolved onto canonical
assignments by the SchemaMapper.
"""

from typing import List, Optional

from ibbi_tracker.codec import decode_keyed
from ibbi_tracker.domain.models import CanonicalRecord, RecordKind
from ibbi_tracker.logging import get_logger
from ibbi_tracker.mapping import SchemaMapper
from ibbi_tracker.scrapers.fetcher import Fetcher

logger = get_logger(__name__, component="sheets")


class SpreadsheetExportClient:
    """Fetches and maps one published spreadsheet export.

    Attributes:
        fetcher: Shared Fetcher
        export_url: Published CSV URL of the sheet
        kind: Record kind the sheet holds
        origin: Site origin used to absolutize relative links
    """

    def __init__(
        self,
        fetcher: Fetcher,
        export_url: str,
        kind: RecordKind = RecordKind.ASSIGNMENTS,
        origin: str = "https://ibbi.gov.in",
    ) -> None:
        if not export_url:
            raise ValueError("export_url is required")
        self.fetcher = fetcher
        self.export_url = export_url
        self.kind = kind
        self.origin = origin

    def read(self, mapper: Optional[SchemaMapper] = None) -> List[CanonicalRecord]:
        """Fetch the export and map its rows.

        Blank lines are skipped; unresolvable columns take defaults and
        unusable rows are dropped by the mapper.

        Raises:
            ScraperError: If the export cannot be fetched
        """
        text = self.fetcher.fetch(self.export_url)
        headers, rows = decode_keyed(text, skip_empty_rows=True)

        logger.info(
            f"Read {len(rows)} rows from spreadsheet export",
            extra={"event": "sheet.read", "kind": self.kind.value, "rows": len(rows), "columns": len(headers)},
        )

        mapper = mapper or SchemaMapper(self.kind, origin=self.origin)
        return mapper.map_keyed(headers, rows)
