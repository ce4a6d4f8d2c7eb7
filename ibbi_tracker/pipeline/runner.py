"""Daily update orchestration: scrape, persist, record the run."""

import threading
from datetime import datetime
from typing import Optional
from uuid import uuid4

from ibbi_tracker.logging import get_logger
from ibbi_tracker.logging.context import log_context
from ibbi_tracker.persistence import LastRunMarker, PersistenceError, RecordStore
from ibbi_tracker.scrapers.service import IBBIScraper
from ibbi_tracker.utils.timestamps import ensure_utc, utc_now

from .models import RunOutcome, RunStatistics, RunStatus

logger = get_logger(__name__, component="pipeline")

SKIP_ALREADY_RAN = "already ran today"
SKIP_IN_PROGRESS = "previous run still in progress"


class DailyUpdatePipeline:
    """
    Runs the daily update at most once per UTC calendar date.

    A run scrapes all three pages, replaces each persisted batch, and only
    then records the last-run marker, so a failed run is retried by the next
    request on the same date.
    """

    def __init__(self, scraper: IBBIScraper, store: RecordStore, marker: LastRunMarker):
        self.scraper = scraper
        self.store = store
        self.marker = marker
        self._lock = threading.Lock()

    def run_daily(self, now: Optional[datetime] = None) -> RunOutcome:
        """
        Execute the daily update unless it already succeeded today.

        Args:
            now: Time of the request (defaults to utc_now()); decides the
                calendar date compared against the marker

        Returns:
            RunOutcome; never raises for scrape or persistence failures
        """
        started_at = ensure_utc(now or utc_now())
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            return self._skipped(started_at, run_id, SKIP_IN_PROGRESS)

        try:
            with log_context(run_id=run_id):
                if self.marker.should_skip(started_at):
                    return self._skipped(started_at, run_id, SKIP_ALREADY_RAN)

                logger.info("Daily update started", extra={"event": "run.started"})
                try:
                    result = self.scraper.get_all_data()
                    counts = self.store.write_all(result)
                    self.marker.record(started_at)
                except PersistenceError as e:
                    return self._failed(started_at, run_id, e)
                except Exception as e:
                    logger.error(
                        f"Unexpected error during daily update: {e}",
                        extra={"event": "run.failed", "error_type": type(e).__name__},
                        exc_info=True,
                    )
                    return RunOutcome(
                        status=RunStatus.FAILED,
                        started_at=started_at,
                        finished_at=utc_now(),
                        run_id=run_id,
                        error=str(e),
                    )

                outcome = RunOutcome(
                    status=RunStatus.SUCCEEDED,
                    started_at=started_at,
                    finished_at=utc_now(),
                    run_id=run_id,
                    counts=counts,
                )
                logger.info(
                    "Daily update completed",
                    extra={"event": "run.completed", **counts},
                )
                return outcome
        finally:
            self._lock.release()

    def run_manual(self, now: Optional[datetime] = None) -> RunOutcome:
        """Clear the marker, then run the daily update regardless of date."""
        self.marker.clear()
        return self.run_daily(now)

    def statistics(self) -> RunStatistics:
        return RunStatistics(
            last_run=self.marker.read(),
            total_runs=self.marker.run_count(),
            data_counts=self.store.counts(),
        )

    @staticmethod
    def _skipped(started_at: datetime, run_id: str, reason: str) -> RunOutcome:
        logger.info(
            f"Skipping daily update: {reason}",
            extra={"event": "run.skipped", "reason": reason, "run_id": run_id},
        )
        return RunOutcome(
            status=RunStatus.SKIPPED,
            started_at=started_at,
            finished_at=utc_now(),
            run_id=run_id,
            reason=reason,
        )

    @staticmethod
    def _failed(started_at: datetime, run_id: str, error: PersistenceError) -> RunOutcome:
        logger.error(
            f"Daily update failed: {error}",
            extra={"event": "run.failed", "error_type": type(error).__name__},
        )
        return RunOutcome(
            status=RunStatus.FAILED,
            started_at=started_at,
            finished_at=utc_now(),
            run_id=run_id,
            error=str(error),
        )
