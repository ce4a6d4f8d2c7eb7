"""Last-run marker guarding the daily update.

The marker is a small JSON document ``{timestamp, date, run_count}``. A run
is skipped when the marker's UTC calendar date equals the date of the
requested run. Clearing the marker is how a forced run gets past the guard.
"""

import json
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ibbi_tracker.logging import get_logger
from ibbi_tracker.utils.timestamps import calendar_date, format_timestamp, parse_iso_datetime, utc_now

from .exceptions import PersistenceError

logger = get_logger(__name__, component="run_marker")

MARKER_FILENAME = "last_run.json"


class LastRunMarker:
    """Reads and writes the last successful run marker."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    @classmethod
    def in_directory(cls, data_dir: Union[str, Path]) -> "LastRunMarker":
        return cls(Path(data_dir) / MARKER_FILENAME)

    def read(self) -> Optional[Dict[str, Any]]:
        """Marker contents, or None when absent or unreadable."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(
                f"Ignoring unreadable run marker {self.path}: {e}",
                extra={"event": "marker.unreadable", "path": str(self.path)},
            )
            return None
        return data if isinstance(data, dict) else None

    def last_run_at(self) -> Optional[datetime]:
        data = self.read()
        if not data:
            return None
        return parse_iso_datetime(data.get("timestamp"))

    def last_run_date(self) -> Optional[date]:
        last = self.last_run_at()
        return calendar_date(last) if last else None

    def run_count(self) -> int:
        data = self.read() or {}
        try:
            return int(data.get("run_count", 0))
        except (TypeError, ValueError):
            return 0

    def should_skip(self, now: Optional[datetime] = None) -> bool:
        """True when a run already succeeded on now's UTC calendar date."""
        last = self.last_run_date()
        return last is not None and last == calendar_date(now or utc_now())

    def record(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Record a successful run at now.

        Raises:
            PersistenceError: If the marker cannot be written
        """
        now = now or utc_now()
        data = {
            "timestamp": format_timestamp(now),
            "date": calendar_date(now).isoformat(),
            "run_count": self.run_count() + 1,
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to write run marker {self.path}: {e}", path=self.path) from e
        return data

    def clear(self) -> bool:
        """Remove the marker so the next run is not skipped.

        Returns:
            True if a marker was removed
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Failed to clear run marker {self.path}: {e}", path=self.path) from e
        logger.info("Cleared last-run marker", extra={"event": "marker.cleared", "path": str(self.path)})
        return True
