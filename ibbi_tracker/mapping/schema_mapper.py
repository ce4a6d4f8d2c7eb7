"""Heuristic column resolution for loosely-named tables.

Hand-maintained spreadsheets and older exports rename and reorder their
columns without notice. The SchemaMapper resolves each canonical field to a
source column by keyword:

- headers are compared lower-cased and trimmed
- headers are scanned in column order; the first header matching any of a
  field's patterns wins that field
- a field without a matching header takes its default
- rows whose primary field resolves to empty or to the "Unknown" sentinel
  are dropped as structurally invalid

The mapper never raises for unresolved columns or unusable rows.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Set, Tuple

from pydantic import ValidationError

from ibbi_tracker.domain.models import (
    DEFAULT_ASSIGNMENT_STATUS,
    UNKNOWN,
    CanonicalRecord,
    KeyedRow,
    PositionalRow,
    RawRow,
    RecordKind,
)
from ibbi_tracker.logging import get_logger
from ibbi_tracker.scrapers.links import find_link, resolve_link
from ibbi_tracker.utils.timestamps import format_timestamp, parse_iso_datetime, utc_now

logger = get_logger(__name__, component="mapping")


@dataclass(frozen=True)
class FieldRule:
    """Keyword patterns that identify one canonical field's column.

    Attributes:
        field: Canonical field name
        contains: Substrings matched against the normalized header
        exact: Whole-header matches (for short tokens such as "rp")
        default: Value used when no column matches or the cell is empty
    """

    field: str
    contains: Tuple[str, ...] = ()
    exact: Tuple[str, ...] = ()
    default: str = ""

    def matches(self, header: str) -> bool:
        normalized = normalize_header(header)
        if normalized in self.exact:
            return True
        return any(pattern in normalized for pattern in self.contains)


def normalize_header(header: Optional[str]) -> str:
    return (header or "").strip().lower()


ID_RULE = FieldRule("id", exact=("id", "record id"))
SCRAPED_AT_RULE = FieldRule("scraped_at", contains=("scraped at", "scraped"))

ASSIGNMENT_RULES: Tuple[FieldRule, ...] = (
    ID_RULE,
    FieldRule(
        "corporate_debtor",
        contains=("corporate debtor", "company", "name of corporate"),
        default=UNKNOWN,
    ),
    FieldRule(
        "resolution_professional",
        contains=("resolution professional", "name of ip", "insolvency professional"),
        exact=("rp", "ip"),
    ),
    FieldRule("date", contains=("date", "order")),
    FieldRule("status", contains=("status",), default=DEFAULT_ASSIGNMENT_STATUS),
    FieldRule("form_g_link", contains=("form g", "link")),
    SCRAPED_AT_RULE,
)

ANNOUNCEMENT_RULES: Tuple[FieldRule, ...] = (
    ID_RULE,
    FieldRule("title", contains=("title", "subject", "announcement", "description"), default=UNKNOWN),
    FieldRule("date", contains=("date",)),
    FieldRule("link", contains=("link", "url")),
    SCRAPED_AT_RULE,
)

PUBLIC_ANNOUNCEMENT_RULES: Tuple[FieldRule, ...] = (
    ID_RULE,
    FieldRule("title", contains=("title", "subject", "name of corporate", "announcement"), default=UNKNOWN),
    FieldRule("date", contains=("date",)),
    FieldRule("link", contains=("link", "url")),
    FieldRule("category", contains=("category", "type")),
    SCRAPED_AT_RULE,
)

RULES_BY_KIND: Dict[RecordKind, Tuple[FieldRule, ...]] = {
    RecordKind.ASSIGNMENTS: ASSIGNMENT_RULES,
    RecordKind.ANNOUNCEMENTS: ANNOUNCEMENT_RULES,
    RecordKind.PUBLIC_ANNOUNCEMENTS: PUBLIC_ANNOUNCEMENT_RULES,
}


@dataclass
class ColumnResolution:
    """Canonical field -> source column index (None when unresolved)."""

    headers: List[str]
    columns: Dict[str, Optional[int]] = field(default_factory=dict)

    def column_of(self, field_name: str) -> Optional[int]:
        return self.columns.get(field_name)

    def header_of(self, field_name: str) -> Optional[str]:
        index = self.columns.get(field_name)
        return None if index is None else self.headers[index]

    @property
    def unresolved(self) -> List[str]:
        return [name for name, index in self.columns.items() if index is None]


def resolve_columns(headers: Sequence[str], rules: Sequence[FieldRule]) -> ColumnResolution:
    """Resolve each rule to the first header, in column order, that it matches."""
    resolution = ColumnResolution(headers=list(headers))
    for rule in rules:
        resolution.columns[rule.field] = next(
            (index for index, header in enumerate(headers) if rule.matches(header)),
            None,
        )
    return resolution


class SchemaMapper:
    """Maps drifting tables of one record kind onto canonical records.

    Works on decoded delimited-text rows (PositionalRow, indexed by column)
    and on spreadsheet-export row objects (KeyedRow, indexed by header)
    through the same resolution.

    Attributes:
        kind: Record kind produced
        origin: Site origin used to absolutize relative links
        rules: Ordered field rules for the kind
    """

    def __init__(
        self,
        kind: RecordKind,
        origin: str = "https://ibbi.gov.in",
        rules: Optional[Sequence[FieldRule]] = None,
        read_timestamp: Optional[datetime] = None,
    ) -> None:
        self.kind = kind
        self.origin = origin
        self.rules = tuple(rules) if rules is not None else RULES_BY_KIND[kind]
        self.read_timestamp = format_timestamp(read_timestamp or utc_now())

    def resolve(self, headers: Sequence[str]) -> ColumnResolution:
        resolution = resolve_columns(headers, self.rules)
        if resolution.unresolved:
            logger.debug(
                f"Unresolved {self.kind.value} columns: {', '.join(resolution.unresolved)}",
                extra={"event": "mapping.columns.unresolved", "kind": self.kind.value},
            )
        return resolution

    def map_rows(self, headers: Sequence[str], rows: Sequence[RawRow]) -> List[CanonicalRecord]:
        """Map rows under the given header set into canonical records.

        Args:
            headers: Ordered source header strings
            rows: PositionalRow or KeyedRow instances

        Returns:
            Records for every structurally valid row, in input order
        """
        resolution = self.resolve(headers)
        # Explicit ids are reserved up front so fallback ids never repeat them
        used_ids = {self._cell(resolution, row, "id").strip() for row in rows} - {""}
        records: List[CanonicalRecord] = []
        dropped = 0
        for index, row in enumerate(rows):
            record = self.map_row(resolution, row, index, used_ids=used_ids)
            if record is None:
                dropped += 1
            else:
                records.append(record)

        logger.info(
            f"Mapped {len(records)} {self.kind.value} rows",
            extra={
                "event": "mapping.rows.mapped",
                "kind": self.kind.value,
                "count": len(records),
                "dropped": dropped,
            },
        )
        return records

    def map_table(self, table: Sequence[Sequence[str]]) -> List[CanonicalRecord]:
        """Map a decoded table whose first row holds the headers."""
        if not table:
            return []
        headers = list(table[0])
        rows = [PositionalRow(cells=tuple(cells), position=index) for index, cells in enumerate(table[1:])]
        return self.map_rows(headers, rows)

    def map_keyed(self, headers: Sequence[str], row_objects: Sequence[Dict[str, str]]) -> List[CanonicalRecord]:
        """Map spreadsheet-export row objects keyed by header."""
        rows = [KeyedRow(values=dict(values), position=index) for index, values in enumerate(row_objects)]
        return self.map_rows(headers, rows)

    def map_row(
        self,
        resolution: ColumnResolution,
        row: RawRow,
        index: int = 0,
        used_ids: Optional[Set[str]] = None,
    ) -> Optional[CanonicalRecord]:
        """Map one row, or return None if it is structurally invalid.

        A row without an id gets ``<prefix>_<position>``, bumped past any id
        in used_ids; the id taken is added to used_ids.
        """
        values: Dict[str, str] = {}
        for rule in self.rules:
            raw = self._cell(resolution, row, rule.field).strip()
            values[rule.field] = raw or rule.default

        primary = values.get(self.kind.primary_field, "")
        if not primary or primary.casefold() == UNKNOWN.casefold():
            return None

        for name in self.kind.model.LINK_FIELDS:
            values[name] = resolve_link(self.origin, find_link(values.get(name, "")))

        position = row.position if row.position is not None else index
        if not values.get("id"):
            values["id"] = self._fallback_id(position, used_ids)
        if parse_iso_datetime(values.get("scraped_at")) is None:
            values["scraped_at"] = self.read_timestamp

        try:
            return self.kind.model(**{name: values.get(name, "") for name in self.kind.model.FIELDS})
        except ValidationError as e:
            logger.debug(
                f"Dropping {self.kind.value} row {position}: {e}",
                extra={"event": "mapping.row.invalid", "kind": self.kind.value},
            )
            return None

    def _fallback_id(self, position: int, used_ids: Optional[Set[str]]) -> str:
        record_id = f"{self.kind.id_prefix}_{position}"
        if used_ids is None:
            return record_id
        while record_id in used_ids:
            position += 1
            record_id = f"{self.kind.id_prefix}_{position}"
        used_ids.add(record_id)
        return record_id

    @staticmethod
    def _cell(resolution: ColumnResolution, row: RawRow, field_name: str) -> str:
        index = resolution.column_of(field_name)
        if index is None:
            return ""
        if isinstance(row, PositionalRow):
            return row.cell(index)
        if isinstance(row, KeyedRow):
            return row.get(resolution.headers[index])
        raise TypeError(f"Unsupported raw row type: {type(row).__name__}")
