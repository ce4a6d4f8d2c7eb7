"""Record normalization service for converting raw rows to canonical records.

This module implements the normalization logic that:
1. Reads raw row values per canonical field (positional or keyed rows)
2. Sanitizes text and applies field defaults
3. Makes link fields absolute against the site origin
4. Assigns batch-unique synthetic ids and the extraction timestamp
"""

import logging
import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from pydantic import ValidationError

from ibbi_tracker.domain.models import (
    DEFAULT_ASSIGNMENT_STATUS,
    EXTRACTED_LAYOUTS,
    CanonicalRecord,
    KeyedRow,
    PositionalRow,
    RawRow,
    RecordKind,
)
from ibbi_tracker.logging import get_logger
from ibbi_tracker.scrapers.exceptions import MalformedRowError
from ibbi_tracker.scrapers.links import find_link, resolve_link
from ibbi_tracker.utils.timestamps import ensure_utc, epoch_millis, format_timestamp, utc_now

logger = get_logger(__name__, component="normalization")


def make_record_id(kind: RecordKind, batch_timestamp: datetime, position: int) -> str:
    """Compose a synthetic id: ``<prefix>_<batch epoch ms>_<position>``."""
    return f"{kind.id_prefix}_{epoch_millis(batch_timestamp)}_{position}"


def apply_field_defaults(kind: RecordKind, values: Dict[str, str]) -> Dict[str, str]:
    """Fill absent fields with their defaults.

    Every field defaults to empty string except the assignment status, which
    keeps the row's own value when non-empty and falls back to "Active".
    """
    model = kind.model
    filled = {name: values.get(name) or "" for name in model.FIELDS}
    if kind is RecordKind.ASSIGNMENTS and not filled["status"]:
        filled["status"] = DEFAULT_ASSIGNMENT_STATUS
    return filled


class RecordNormalizer:
    """Normalizes raw rows of one batch into canonical records.

    All records of a batch share one batch timestamp, which is both their
    ``scraped_at`` value and part of their ids.
    """

    def __init__(
        self,
        origin: str,
        batch_timestamp: Optional[datetime] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize RecordNormalizer.

        Args:
            origin: Site origin used to absolutize relative links
            batch_timestamp: Extraction time for this batch (UTC). Defaults to utc_now()
            logger_instance: Logger instance (defaults to module logger)
        """
        self.origin = origin
        self.batch_timestamp = ensure_utc(batch_timestamp or utc_now())
        self.logger = logger_instance or logger

    def normalize(self, row: RawRow, kind: RecordKind, position: Optional[int] = None) -> CanonicalRecord:
        """Normalize a single raw row.

        Args:
            row: Positional row in the extracted layout, or keyed row whose
                keys are canonical field names or file headers
            kind: Record kind to produce
            position: Overrides the row's own position in the id

        Returns:
            Canonical record of the kind's model

        Raises:
            MalformedRowError: If the identifying field is empty after trimming
            pydantic.ValidationError: If a field fails model validation
        """
        values = {name: self._sanitize_text(value) for name, value in self._read_fields(row, kind).items()}

        primary = kind.primary_field
        if not values.get(primary):
            raise MalformedRowError(f"empty {primary}")

        for name in kind.model.LINK_FIELDS:
            values[name] = resolve_link(self.origin, find_link(values.get(name, "")))

        values = apply_field_defaults(kind, values)
        values["id"] = make_record_id(kind, self.batch_timestamp, row.position if position is None else position)
        values["scraped_at"] = format_timestamp(self.batch_timestamp)

        return kind.model(**values)

    def normalize_batch(self, rows: Iterable[RawRow], kind: RecordKind) -> List[CanonicalRecord]:
        """Normalize a batch, skipping rows that cannot become records.

        Rows without their identifying field are dropped silently; rows that
        fail validation are logged and skipped. Positions already used in the
        batch are replaced by the row's index so ids stay unique.
        """
        records: List[CanonicalRecord] = []
        used_positions: Set[int] = set()
        for index, row in enumerate(rows):
            position = row.position if row.position not in used_positions else index
            while position in used_positions:
                position += 1
            try:
                record = self.normalize(row, kind, position=position)
            except MalformedRowError:
                continue
            except ValidationError as e:
                self.logger.warning(
                    f"Skipping invalid {kind.value} row at position {row.position}: {e}",
                    extra={"event": "normalization.row.invalid", "kind": kind.value},
                )
                continue
            used_positions.add(position)
            records.append(record)

        self.logger.info(
            f"Normalized {len(records)} {kind.value} records",
            extra={
                "event": "normalization.batch.completed",
                "kind": kind.value,
                "count": len(records),
            },
        )
        return records

    @staticmethod
    def _read_fields(row: RawRow, kind: RecordKind) -> Dict[str, str]:
        if isinstance(row, PositionalRow):
            layout = EXTRACTED_LAYOUTS[kind]
            return {name: row.cell(index) for index, name in enumerate(layout) if name}
        if isinstance(row, KeyedRow):
            model = kind.model
            return {
                name: row.get(name) or row.get(header)
                for name, header in zip(model.FIELDS, model.HEADERS)
            }
        raise TypeError(f"Unsupported raw row type: {type(row).__name__}")

    @staticmethod
    def _sanitize_text(text: Optional[str]) -> str:
        """Trim and collapse whitespace (empty string for None)."""
        if not text:
            return ""
        return re.sub(r"\s+", " ", text.strip())
