"""Data models for daily update runs and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class RunStatus(str, Enum):
    """How a requested run ended."""

    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class RunOutcome:
    """
    Result of one requested daily update.

    Attributes:
        status: skipped, succeeded or failed
        started_at: UTC time the run was requested
        finished_at: UTC time the run ended
        run_id: Identifier attached to the run's log records
        reason: Why the run was skipped (skipped runs only)
        counts: Records written per kind (succeeded runs only)
        error: Error message (failed runs only)
    """

    status: RunStatus
    started_at: datetime
    finished_at: datetime
    run_id: str = ""
    reason: Optional[str] = None
    counts: Dict[str, int] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """True unless the run failed; a skipped run is not a failure."""
        return self.status is not RunStatus.FAILED

    @property
    def skipped(self) -> bool:
        return self.status is RunStatus.SKIPPED

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "reason": self.reason,
            "counts": dict(self.counts),
            "error": self.error,
        }


@dataclass
class RunStatistics:
    """Last run details and persisted record counts."""

    last_run: Optional[Dict[str, Any]] = None
    total_runs: int = 0
    data_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "last_run": self.last_run,
            "total_runs": self.total_runs,
            "data_counts": dict(self.data_counts),
        }
