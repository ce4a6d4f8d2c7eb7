"""Canned source pages and a fetcher that serves them.

Lets extractors, the scraper service and the pipeline run without network
access. Pages mirror the structure of the live site: a header row, data rows,
and the odd decorative or short row that must be discarded.
"""

from typing import Dict, List, Union

from ibbi_tracker.config.models import SiteConfig

ORIGIN = "https://ibbi.gov.in"

SITE = SiteConfig()

ASSIGNMENTS_PAGE = """
<html><body>
<table>
  <tr><td>Corporate Debtor</td><td>Resolution Professional</td><td>Reg. No.</td>
      <td>Date</td><td>Status</td><td>Form G</td></tr>
  <tr><td>Acme Pvt Ltd</td><td>Jane Doe</td><td>IBBI/IPA-001</td>
      <td>2024-01-05</td><td></td>
      <td><a href="#" onclick="window.open('/docs/formg.pdf')">View</a></td></tr>
  <tr><td>Globex, Inc.</td><td>John "JJ" Smith</td><td>IBBI/IPA-002</td>
      <td>2024-01-04</td><td>Closed</td>
      <td><a href="https://cdn.ibbi.gov.in/formg/globex.pdf">View</a></td></tr>
  <tr><td>  </td><td>Nobody</td><td></td><td>2024-01-03</td><td>Active</td></tr>
  <tr><td colspan="5">Page 1 of 1</td></tr>
</table>
</body></html>
"""

ANNOUNCEMENTS_PAGE = """
<html><body>
<table>
  <thead><tr><th>Date</th><th>Subject</th></tr></thead>
  <tbody>
    <tr><td>05 Jan 2024</td>
        <td><a href="/uploads/whatsnew/circular.pdf">Circular on CIRP timelines</a></td></tr>
    <tr><td>04 Jan 2024</td>
        <td><a href="javascript:void(0)" onclick="newwindow1('uploads/whatsnew/notice.pdf')">Notice
            of hearing</a></td></tr>
    <tr><td>03 Jan 2024</td><td>Plain text entry</td></tr>
    <tr><td>only one cell</td></tr>
  </tbody>
</table>
</body></html>
"""

PUBLIC_ANNOUNCEMENTS_PAGE = """
<html><body>
<table>
  <tbody>
    <tr><td><a href="/uploads/public/acme.pdf">Acme Pvt Ltd - Invitation for claims</a></td>
        <td>CIRP</td><td>05 Jan 2024</td></tr>
    <tr><td><a href="#" onclick="window.open('https://ibbi.gov.in/uploads/public/globex.pdf')">Globex Inc</a></td>
        <td>Liquidation</td><td>04 Jan 2024</td></tr>
    <tr><td>Too short</td><td>CIRP</td></tr>
  </tbody>
</table>
</body></html>
"""

EMPTY_PAGE = "<html><body><p>No records</p></body></html>"

DEFAULT_PAGES: Dict[str, str] = {
    SITE.assignments_url: ASSIGNMENTS_PAGE,
    SITE.announcements_url: ANNOUNCEMENTS_PAGE,
    SITE.public_announcements_url: PUBLIC_ANNOUNCEMENTS_PAGE,
}


class FixtureFetcher:
    """Stands in for Fetcher: serves canned text or raises a canned error.

    Attributes:
        pages: URL -> page text, or URL -> exception instance to raise
        requested: URLs fetched, in call order
    """

    def __init__(self, pages: Dict[str, Union[str, Exception]] = None):
        self.pages = dict(DEFAULT_PAGES if pages is None else pages)
        self.requested: List[str] = []

    def fetch(self, url: str) -> str:
        self.requested.append(url)
        page = self.pages.get(url, EMPTY_PAGE)
        if isinstance(page, Exception):
            raise page
        return page
