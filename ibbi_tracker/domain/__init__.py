"""Domain models for the IBBI tracker."""

from .models import (
    DEFAULT_ASSIGNMENT_STATUS,
    EXTRACTED_LAYOUTS,
    UNKNOWN,
    Announcement,
    Assignment,
    CanonicalRecord,
    KeyedRow,
    PositionalRow,
    PublicAnnouncement,
    RawRow,
    RecordKind,
    ScrapeResult,
)

__all__ = [
    "PositionalRow",
    "KeyedRow",
    "RawRow",
    "CanonicalRecord",
    "Assignment",
    "Announcement",
    "PublicAnnouncement",
    "RecordKind",
    "ScrapeResult",
    "UNKNOWN",
    "DEFAULT_ASSIGNMENT_STATUS",
    "EXTRACTED_LAYOUTS",
]
