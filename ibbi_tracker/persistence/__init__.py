"""Persistence layer: per-kind text files and the last-run marker."""

from .exceptions import PersistenceError
from .run_marker import MARKER_FILENAME, LastRunMarker
from .store import RecordStore

__all__ = ["PersistenceError", "RecordStore", "LastRunMarker", "MARKER_FILENAME"]
