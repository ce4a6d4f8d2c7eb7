"""Unit tests for the daily update pipeline.

Covers:
- The calendar-date guard (skip, clear, re-run)
- Marker recorded only after every batch is written
- Persistence failures reported as failed outcomes
- Lock behavior (overlapping requests are skipped)
- Statistics
"""

import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from ibbi_tracker.domain.models import Announcement, Assignment, RecordKind, ScrapeResult
from ibbi_tracker.persistence import LastRunMarker, PersistenceError, RecordStore
from ibbi_tracker.pipeline import DailyUpdatePipeline, RunOutcome, RunStatus
from ibbi_tracker.pipeline.runner import SKIP_ALREADY_RAN, SKIP_IN_PROGRESS
from ibbi_tracker.scrapers.service import IBBIScraper
from tests.helpers import SITE, FixtureFetcher

MORNING = datetime(2024, 1, 5, 6, 0, tzinfo=timezone.utc)
EVENING = datetime(2024, 1, 5, 18, 0, tzinfo=timezone.utc)
STAMP = "2024-01-05T06:00:00.000Z"


def scrape_result():
    return ScrapeResult(
        assignments=[Assignment(id="assign_1_0", corporate_debtor="Acme", scraped_at=STAMP)],
        announcements=[
            Announcement(id="ann_1_0", title="A", scraped_at=STAMP),
            Announcement(id="ann_1_1", title="B", scraped_at=STAMP),
        ],
    )


@pytest.fixture
def scraper():
    mock = MagicMock(spec=IBBIScraper)
    mock.get_all_data.return_value = scrape_result()
    return mock


@pytest.fixture
def store(tmp_path):
    return RecordStore(tmp_path)


@pytest.fixture
def marker(tmp_path):
    return LastRunMarker.in_directory(tmp_path)


@pytest.fixture
def pipeline(scraper, store, marker):
    return DailyUpdatePipeline(scraper, store, marker)


class TestRunDaily:
    """Tests for run_daily."""

    def test_successful_run_writes_batches_and_marker(self, pipeline, store, marker):
        outcome = pipeline.run_daily(MORNING)

        assert isinstance(outcome, RunOutcome)
        assert outcome.status is RunStatus.SUCCEEDED
        assert outcome.success
        assert outcome.counts == {"assignments": 1, "announcements": 2, "public_announcements": 0}
        assert store.counts() == outcome.counts
        assert marker.read()["date"] == "2024-01-05"
        assert outcome.run_id

    def test_second_run_same_date_is_skipped(self, pipeline, scraper):
        pipeline.run_daily(MORNING)

        outcome = pipeline.run_daily(EVENING)

        assert outcome.status is RunStatus.SKIPPED
        assert outcome.skipped
        assert outcome.success
        assert outcome.reason == SKIP_ALREADY_RAN
        assert scraper.get_all_data.call_count == 1

    def test_run_after_clearing_marker_executes(self, pipeline, scraper, marker):
        pipeline.run_daily(MORNING)
        marker.clear()

        outcome = pipeline.run_daily(EVENING)

        assert outcome.status is RunStatus.SUCCEEDED
        assert scraper.get_all_data.call_count == 2
        assert marker.run_count() == 1

    def test_persistence_failure_is_failed_outcome_without_marker(self, pipeline, store, marker):
        with patch.object(store, "write_all", side_effect=PersistenceError("disk full")):
            outcome = pipeline.run_daily(MORNING)

        assert outcome.status is RunStatus.FAILED
        assert not outcome.success
        assert "disk full" in outcome.error
        assert marker.read() is None

    def test_failed_run_is_retried_same_day(self, pipeline, store, scraper):
        with patch.object(store, "write_all", side_effect=PersistenceError("disk full")):
            pipeline.run_daily(MORNING)

        outcome = pipeline.run_daily(EVENING)

        assert outcome.status is RunStatus.SUCCEEDED
        assert scraper.get_all_data.call_count == 2

    def test_unexpected_error_is_failed_outcome(self, pipeline, scraper):
        scraper.get_all_data.side_effect = RuntimeError("unexpected")

        outcome = pipeline.run_daily(MORNING)

        assert outcome.status is RunStatus.FAILED
        assert outcome.error == "unexpected"

    def test_overlapping_request_is_skipped(self, scraper, store, marker):
        started = threading.Event()
        release = threading.Event()

        def slow_scrape():
            started.set()
            release.wait(timeout=5)
            return scrape_result()

        scraper.get_all_data.side_effect = slow_scrape
        pipeline = DailyUpdatePipeline(scraper, store, marker)
        outcomes = []
        worker = threading.Thread(target=lambda: outcomes.append(pipeline.run_daily(MORNING)))
        worker.start()
        started.wait(timeout=5)

        overlapping = pipeline.run_daily(MORNING)
        release.set()
        worker.join(timeout=5)

        assert overlapping.status is RunStatus.SKIPPED
        assert overlapping.reason == SKIP_IN_PROGRESS
        assert outcomes[0].status is RunStatus.SUCCEEDED


class TestRunManual:
    """Tests for forced runs."""

    def test_manual_run_ignores_same_day_marker(self, pipeline, scraper, marker):
        pipeline.run_daily(MORNING)

        outcome = pipeline.run_manual(EVENING)

        assert outcome.status is RunStatus.SUCCEEDED
        assert scraper.get_all_data.call_count == 2
        assert marker.read()["timestamp"] == "2024-01-05T18:00:00.000Z"


class TestStatistics:
    """Tests for run statistics."""

    def test_before_any_run(self, pipeline):
        stats = pipeline.statistics()

        assert stats.last_run is None
        assert stats.total_runs == 0
        assert stats.data_counts == {"assignments": 0, "announcements": 0, "public_announcements": 0}

    def test_after_runs(self, pipeline):
        pipeline.run_daily(MORNING)

        stats = pipeline.statistics().to_dict()

        assert stats["total_runs"] == 1
        assert stats["last_run"]["date"] == "2024-01-05"
        assert stats["data_counts"]["announcements"] == 2


class TestWithFixturePages:
    """The pipeline driven by a real scraper over canned pages."""

    def test_daily_run_persists_scraped_pages(self, store, marker):
        pipeline = DailyUpdatePipeline(IBBIScraper(SITE, FixtureFetcher()), store, marker)

        outcome = pipeline.run_daily(MORNING)

        assert outcome.counts == {"assignments": 2, "announcements": 3, "public_announcements": 2}
        links = [a.form_g_link for a in store.read_batch(RecordKind.ASSIGNMENTS)]
        assert links == ["https://ibbi.gov.in/docs/formg.pdf", "https://cdn.ibbi.gov.in/formg/globex.pdf"]
