"""File-backed record store.

One delimited-text file per record kind under ``data_dir``. Every write
replaces the file's contents wholesale with the new batch. Each file is
written to a temporary sibling and renamed over the target so a reader never
sees a half-written file; the three files are not committed as a set.
"""

import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

from ibbi_tracker.codec import decode, encode_records
from ibbi_tracker.domain.models import CanonicalRecord, RecordKind, ScrapeResult
from ibbi_tracker.logging import get_logger
from ibbi_tracker.mapping import SchemaMapper

from .exceptions import PersistenceError

logger = get_logger(__name__, component="store")


class RecordStore:
    """Reads and writes the per-kind text files.

    Attributes:
        data_dir: Directory holding the artifacts
        origin: Site origin handed to the SchemaMapper on read
    """

    def __init__(self, data_dir: Union[str, Path], origin: str = "https://ibbi.gov.in") -> None:
        self.data_dir = Path(data_dir)
        self.origin = origin

    def path_for(self, kind: RecordKind) -> Path:
        return self.data_dir / kind.filename

    def initialize(self) -> List[Path]:
        """Create header-only files for kinds that have no file yet.

        Returns:
            Paths of the files created
        """
        created = []
        for kind in RecordKind:
            path = self.path_for(kind)
            if not path.exists():
                self.write_batch(kind, [])
                created.append(path)
        return created

    def write_batch(self, kind: RecordKind, records: List[CanonicalRecord]) -> Path:
        """Replace the kind's file with the given batch.

        Raises:
            PersistenceError: If the file cannot be written
        """
        path = self.path_for(kind)
        content = encode_records(records, kind.model)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            _atomic_write(path, content)
        except OSError as e:
            raise PersistenceError(f"Failed to write {kind.value} to {path}: {e}", path=path) from e

        logger.info(
            f"Wrote {len(records)} {kind.value} records",
            extra={"event": "store.written", "kind": kind.value, "count": len(records), "path": str(path)},
        )
        return path

    def write_all(self, result: ScrapeResult) -> Dict[str, int]:
        """Write every batch of a scrape, one file at a time.

        A failure partway leaves earlier files updated and later ones stale.

        Raises:
            PersistenceError: On the first file that cannot be written
        """
        written = {}
        for kind in RecordKind:
            batch = result.batch(kind)
            self.write_batch(kind, batch)
            written[kind.value] = len(batch)
        return written

    def read_text(self, kind: RecordKind) -> Optional[str]:
        """Raw file contents, or None if the file does not exist."""
        path = self.path_for(kind)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}", path=path) from e

    def read_batch(self, kind: RecordKind) -> List[CanonicalRecord]:
        """Read a persisted batch back through the SchemaMapper.

        A missing file reads as an empty batch, the same as a header-only file.
        """
        text = self.read_text(kind)
        if not text:
            return []
        return SchemaMapper(kind, origin=self.origin).map_table(decode(text))

    def count(self, kind: RecordKind) -> int:
        """Number of data rows persisted for a kind.

        Rows are counted after decoding, so quoted line breaks do not inflate
        the count.
        """
        text = self.read_text(kind)
        if not text:
            return 0
        return max(len(decode(text)) - 1, 0)

    def counts(self) -> Dict[str, int]:
        return {kind.value: self.count(kind) for kind in RecordKind}


def _atomic_write(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
