"""Aggregate scraper service.

``IBBIScraper`` holds the site configuration and one Fetcher, and runs the
three extractors concurrently. The Fetcher hands each worker thread its own
HTTP session. Each extractor's batch is normalized inside
its own unit of work, so a failing or slow page only affects its own batch.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from ibbi_tracker.config.models import AppConfig, SiteConfig
from ibbi_tracker.domain.models import CanonicalRecord, RecordKind, ScrapeResult
from ibbi_tracker.logging import get_logger
from ibbi_tracker.logging.context import get_log_context, log_context
from ibbi_tracker.normalization.service import RecordNormalizer
from ibbi_tracker.utils.timestamps import utc_now

from .announcements import AnnouncementsExtractor
from .assignments import AssignmentsExtractor
from .base import BaseExtractor
from .fetcher import Fetcher
from .public_announcements import PublicAnnouncementsExtractor

logger = get_logger(__name__, component="scraper")


class IBBIScraper:
    """Explicit scraper service passed to whoever needs a scrape.

    Attributes:
        site: Origin and page URLs
        fetcher: Fetcher (timeout, TLS policy, browser headers; one session per thread)
        extractors: One extractor per record kind
    """

    def __init__(self, site: SiteConfig, fetcher: Fetcher) -> None:
        self.site = site
        self.fetcher = fetcher
        self.extractors: Dict[RecordKind, BaseExtractor] = {
            RecordKind.ASSIGNMENTS: AssignmentsExtractor(fetcher, site.assignments_url, site.origin),
            RecordKind.ANNOUNCEMENTS: AnnouncementsExtractor(fetcher, site.announcements_url, site.origin),
            RecordKind.PUBLIC_ANNOUNCEMENTS: PublicAnnouncementsExtractor(
                fetcher, site.public_announcements_url, site.origin
            ),
        }

    @classmethod
    def from_config(cls, app_config: AppConfig, fetcher: Optional[Fetcher] = None) -> "IBBIScraper":
        return cls(app_config.site, fetcher or Fetcher.from_config(app_config.http))

    def scrape(self, kind: RecordKind) -> List[CanonicalRecord]:
        """Extract and normalize one record kind.

        Never raises; any failure yields an empty batch.
        """
        try:
            rows = self.extractors[kind].extract()
            normalizer = RecordNormalizer(self.site.origin, batch_timestamp=utc_now())
            return normalizer.normalize_batch(rows, kind)
        except Exception as e:
            logger.error(
                f"Scrape of {kind.value} failed: {e}",
                extra={"event": "extractor.failed", "extractor": kind.value, "error_type": type(e).__name__},
                exc_info=True,
            )
            return []

    def get_all_data(self) -> ScrapeResult:
        """Scrape all three pages concurrently.

        Always returns a ScrapeResult; any batch may be empty if its page
        failed.
        """
        logger.info("Starting scrape of all sources", extra={"event": "scrape.started"})

        context = get_log_context()
        batches: Dict[RecordKind, List[CanonicalRecord]] = {}
        with ThreadPoolExecutor(max_workers=len(self.extractors), thread_name_prefix="extractor") as pool:
            futures = {kind: pool.submit(self._scrape_in_context, kind, context) for kind in self.extractors}
            for kind, future in futures.items():
                try:
                    batches[kind] = future.result()
                except Exception as e:
                    logger.error(
                        f"Extractor {kind.value} raised: {e}",
                        extra={"event": "extractor.failed", "extractor": kind.value},
                        exc_info=True,
                    )
                    batches[kind] = []

        result = ScrapeResult(
            assignments=batches.get(RecordKind.ASSIGNMENTS, []),
            announcements=batches.get(RecordKind.ANNOUNCEMENTS, []),
            public_announcements=batches.get(RecordKind.PUBLIC_ANNOUNCEMENTS, []),
            last_scraped=utc_now(),
        )

        logger.info(
            "Scrape completed",
            extra={"event": "scrape.completed", **result.counts()},
        )
        return result

    def _scrape_in_context(self, kind: RecordKind, context: dict) -> List[CanonicalRecord]:
        # Worker threads do not inherit contextvars
        with log_context(**{**context, "extractor": kind.value}):
            return self.scrape(kind)
