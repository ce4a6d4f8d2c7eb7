"""Tests for the per-page extractors."""

from unittest.mock import patch

import pytest

from ibbi_tracker.domain.models import PositionalRow
from ibbi_tracker.scrapers import (
    AnnouncementsExtractor,
    AssignmentsExtractor,
    HTTPStatusError,
    NetworkError,
    PublicAnnouncementsExtractor,
)
from tests.helpers import (
    ANNOUNCEMENTS_PAGE,
    ASSIGNMENTS_PAGE,
    EMPTY_PAGE,
    ORIGIN,
    PUBLIC_ANNOUNCEMENTS_PAGE,
    SITE,
    FixtureFetcher,
)


@pytest.fixture
def fetcher():
    return FixtureFetcher()


class TestAssignmentsExtractor:
    """Tests for the assignments page."""

    def test_header_row_is_skipped_and_rows_parsed(self, fetcher):
        extractor = AssignmentsExtractor(fetcher, SITE.assignments_url, ORIGIN)

        rows = extractor.parse(ASSIGNMENTS_PAGE)

        assert [row.cell(0) for row in rows] == ["Acme Pvt Ltd", "Globex, Inc."]
        assert all(isinstance(row, PositionalRow) for row in rows)

    def test_cells_follow_page_layout(self, fetcher):
        extractor = AssignmentsExtractor(fetcher, SITE.assignments_url, ORIGIN)

        acme, globex = extractor.parse(ASSIGNMENTS_PAGE)

        assert acme.cells == (
            "Acme Pvt Ltd",
            "Jane Doe",
            "IBBI/IPA-001",
            "2024-01-05",
            "",
            "https://ibbi.gov.in/docs/formg.pdf",
        )
        assert acme.position == 1
        assert globex.cell(1) == 'John "JJ" Smith'
        assert globex.cell(4) == "Closed"
        assert globex.cell(5) == "https://cdn.ibbi.gov.in/formg/globex.pdf"

    def test_row_without_sixth_cell_has_empty_link(self, fetcher):
        page = """<table><tr><th>h</th></tr>
            <tr><td>Initech</td><td>Bill</td><td></td><td>2024-01-02</td><td>Active</td></tr></table>"""
        extractor = AssignmentsExtractor(fetcher, SITE.assignments_url, ORIGIN)

        (row,) = extractor.parse(page)

        assert row.cell(5) == ""

    def test_empty_page_yields_no_rows(self, fetcher):
        extractor = AssignmentsExtractor(fetcher, SITE.assignments_url, ORIGIN)

        assert extractor.parse(EMPTY_PAGE) == []


class TestAnnouncementsExtractor:
    """Tests for the announcements page."""

    def test_rows_with_href_and_onclick_links(self, fetcher):
        extractor = AnnouncementsExtractor(fetcher, SITE.announcements_url, ORIGIN)

        rows = extractor.parse(ANNOUNCEMENTS_PAGE)

        assert [row.cells for row in rows] == [
            ("05 Jan 2024", "Circular on CIRP timelines", "https://ibbi.gov.in/uploads/whatsnew/circular.pdf"),
            ("04 Jan 2024", "Notice of hearing", "https://ibbi.gov.in/uploads/whatsnew/notice.pdf"),
            ("03 Jan 2024", "Plain text entry", ""),
        ]

    def test_falls_back_to_any_table_row_without_tbody(self, fetcher):
        page = "<table><tr><td>01 Jan 2024</td><td><a href='/a.pdf'>A</a></td></tr></table>"
        extractor = AnnouncementsExtractor(fetcher, SITE.announcements_url, ORIGIN)

        (row,) = extractor.parse(page)

        assert row.cells == ("01 Jan 2024", "A", "https://ibbi.gov.in/a.pdf")


class TestPublicAnnouncementsExtractor:
    """Tests for the public announcements page."""

    def test_rows_parsed_and_short_rows_dropped(self, fetcher):
        extractor = PublicAnnouncementsExtractor(fetcher, SITE.public_announcements_url, ORIGIN)

        rows = extractor.parse(PUBLIC_ANNOUNCEMENTS_PAGE)

        assert [row.cells for row in rows] == [
            (
                "Acme Pvt Ltd - Invitation for claims",
                "CIRP",
                "05 Jan 2024",
                "https://ibbi.gov.in/uploads/public/acme.pdf",
            ),
            ("Globex Inc", "Liquidation", "04 Jan 2024", "https://ibbi.gov.in/uploads/public/globex.pdf"),
        ]


class TestExtract:
    """Tests for fetch-then-parse error handling."""

    def test_extract_fetches_configured_url(self, fetcher):
        extractor = AnnouncementsExtractor(fetcher, SITE.announcements_url, ORIGIN)

        rows = extractor.extract()

        assert len(rows) == 3
        assert fetcher.requested == [SITE.announcements_url]

    @pytest.mark.parametrize(
        "error",
        [
            NetworkError("refused", url=SITE.announcements_url),
            HTTPStatusError("HTTP 503", status_code=503, url=SITE.announcements_url),
        ],
    )
    def test_fetch_errors_degrade_to_empty(self, error):
        fetcher = FixtureFetcher({SITE.announcements_url: error})
        extractor = AnnouncementsExtractor(fetcher, SITE.announcements_url, ORIGIN)

        assert extractor.extract() == []

    def test_unexpected_parse_error_degrades_to_empty(self, fetcher):
        extractor = AnnouncementsExtractor(fetcher, SITE.announcements_url, ORIGIN)

        with patch.object(extractor, "parse_row", side_effect=RuntimeError("markup changed")):
            assert extractor.extract() == []
