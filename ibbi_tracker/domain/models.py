"""Core domain models for raw rows and canonical records.

This module defines the data structures used throughout the application:
- PositionalRow / KeyedRow: tagged raw rows before any semantic mapping
- Assignment, Announcement, PublicAnnouncement: canonical records
- RecordKind: the three record types, with their file headers and id prefixes
- ScrapeResult: the joined output of one aggregate scrape
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Dict, List, Mapping, Optional, Tuple, Type, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ibbi_tracker.utils.timestamps import parse_iso_datetime

UNKNOWN = "Unknown"
DEFAULT_ASSIGNMENT_STATUS = "Active"


@dataclass(frozen=True)
class PositionalRow:
    """Ordered text cells, as extracted from an HTML table or a headerless file.

    Attributes:
        cells: Cell texts in source column order
        position: Row position within its source (used for synthetic ids)
    """

    cells: Tuple[str, ...]
    position: int = 0

    def cell(self, index: int) -> str:
        """Cell text at index, or empty string when the row is shorter."""
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return ""


@dataclass(frozen=True)
class KeyedRow:
    """Text values keyed by arbitrary header strings (spreadsheet-export style)."""

    values: Mapping[str, str]
    position: int = 0

    def get(self, header: str) -> str:
        value = self.values.get(header)
        return "" if value is None else str(value)


RawRow = Union[PositionalRow, KeyedRow]


class CanonicalRecord(BaseModel):
    """Fields shared by every canonical record.

    Every textual field is present and defaults to an empty string; link
    fields, when non-empty, must be absolute http(s) URLs.
    """

    HEADERS: ClassVar[Tuple[str, ...]] = ()
    FIELDS: ClassVar[Tuple[str, ...]] = ()
    LINK_FIELDS: ClassVar[Tuple[str, ...]] = ()

    id: str = Field(..., min_length=1, description="Synthetic id, unique within one batch")
    scraped_at: str = Field(..., description="ISO-8601 extraction timestamp")

    @field_validator("scraped_at")
    @classmethod
    def validate_scraped_at(cls, v: str) -> str:
        """Reject timestamps that are not ISO-8601."""
        if parse_iso_datetime(v) is None:
            raise ValueError(f"scraped_at must be an ISO-8601 timestamp, got: {v!r}")
        return v

    @model_validator(mode="after")
    def validate_links(self):
        """Ensure non-empty link fields are absolute URLs."""
        for name in self.LINK_FIELDS:
            link = getattr(self, name)
            if link and not link.lower().startswith(("http://", "https://")):
                raise ValueError(f"{name} must be an absolute URL, got: {link!r}")
        return self

    def to_row(self) -> List[str]:
        """Field values in file-header order."""
        return [getattr(self, name) for name in self.FIELDS]

    @classmethod
    def from_row(cls, row: List[str]) -> "CanonicalRecord":
        """Build a record from a row in file-header order."""
        padded = list(row) + [""] * (len(cls.FIELDS) - len(row))
        return cls(**dict(zip(cls.FIELDS, padded)))


class Assignment(CanonicalRecord):
    """Corporate insolvency case linking a debtor to a resolution professional."""

    HEADERS: ClassVar[Tuple[str, ...]] = (
        "ID",
        "Corporate Debtor",
        "Resolution Professional",
        "Date",
        "Status",
        "Form G Link",
        "Scraped At",
    )
    FIELDS: ClassVar[Tuple[str, ...]] = (
        "id",
        "corporate_debtor",
        "resolution_professional",
        "date",
        "status",
        "form_g_link",
        "scraped_at",
    )
    LINK_FIELDS: ClassVar[Tuple[str, ...]] = ("form_g_link",)

    corporate_debtor: str = Field(..., min_length=1)
    resolution_professional: str = ""
    date: str = ""
    status: str = DEFAULT_ASSIGNMENT_STATUS
    form_g_link: str = ""

    model_config = {"json_schema_extra": {"example": {
        "id": "assign_1704434400000_1",
        "corporate_debtor": "Acme Pvt Ltd",
        "resolution_professional": "Jane Doe",
        "date": "2024-01-05",
        "status": "Active",
        "form_g_link": "https://ibbi.gov.in/docs/formg.pdf",
        "scraped_at": "2024-01-05T06:00:00.000Z",
    }}}


class Announcement(CanonicalRecord):
    """Entry from the regulator's "what's new" listing."""

    HEADERS: ClassVar[Tuple[str, ...]] = ("ID", "Title", "Date", "Link", "Scraped At")
    FIELDS: ClassVar[Tuple[str, ...]] = ("id", "title", "date", "link", "scraped_at")
    LINK_FIELDS: ClassVar[Tuple[str, ...]] = ("link",)

    title: str = Field(..., min_length=1)
    date: str = ""
    link: str = ""


class PublicAnnouncement(CanonicalRecord):
    """Public announcement notice with its category."""

    HEADERS: ClassVar[Tuple[str, ...]] = ("ID", "Title", "Date", "Link", "Category", "Scraped At")
    FIELDS: ClassVar[Tuple[str, ...]] = ("id", "title", "date", "link", "category", "scraped_at")
    LINK_FIELDS: ClassVar[Tuple[str, ...]] = ("link",)

    title: str = Field(..., min_length=1)
    date: str = ""
    link: str = ""
    category: str = ""


class RecordKind(str, Enum):
    """The three record types, named after their persisted artifacts."""

    ASSIGNMENTS = "assignments"
    ANNOUNCEMENTS = "announcements"
    PUBLIC_ANNOUNCEMENTS = "public_announcements"

    @property
    def model(self) -> Type[CanonicalRecord]:
        return _KIND_MODELS[self]

    @property
    def id_prefix(self) -> str:
        return _KIND_PREFIXES[self]

    @property
    def primary_field(self) -> str:
        """Identifying field; a record without it is not a record."""
        return "corporate_debtor" if self is RecordKind.ASSIGNMENTS else "title"

    @property
    def headers(self) -> Tuple[str, ...]:
        return self.model.HEADERS

    @property
    def filename(self) -> str:
        return f"{self.value}.csv"


_KIND_MODELS: Dict[RecordKind, Type[CanonicalRecord]] = {
    RecordKind.ASSIGNMENTS: Assignment,
    RecordKind.ANNOUNCEMENTS: Announcement,
    RecordKind.PUBLIC_ANNOUNCEMENTS: PublicAnnouncement,
}

_KIND_PREFIXES: Dict[RecordKind, str] = {
    RecordKind.ASSIGNMENTS: "assign",
    RecordKind.ANNOUNCEMENTS: "ann",
    RecordKind.PUBLIC_ANNOUNCEMENTS: "pub",
}

# Field carried by each cell of an extracted positional row; "" marks a column
# the source page has but the canonical record does not use.
EXTRACTED_LAYOUTS: Dict[RecordKind, Tuple[str, ...]] = {
    RecordKind.ASSIGNMENTS: (
        "corporate_debtor",
        "resolution_professional",
        "",
        "date",
        "status",
        "form_g_link",
    ),
    RecordKind.ANNOUNCEMENTS: ("date", "title", "link"),
    RecordKind.PUBLIC_ANNOUNCEMENTS: ("title", "category", "date", "link"),
}


@dataclass
class ScrapeResult:
    """Joined output of one aggregate scrape.

    Any of the three batches may be empty; the result itself always exists.
    """

    assignments: List[Assignment] = field(default_factory=list)
    announcements: List[Announcement] = field(default_factory=list)
    public_announcements: List[PublicAnnouncement] = field(default_factory=list)
    last_scraped: Optional[datetime] = None

    def batch(self, kind: RecordKind) -> List[CanonicalRecord]:
        return getattr(self, kind.value)

    def counts(self) -> Dict[str, int]:
        return {kind.value: len(self.batch(kind)) for kind in RecordKind}
