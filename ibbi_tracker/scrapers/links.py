"""Link recovery for table rows.

Some source rows carry their real target only inside an inline event handler
(``onclick="window.open('/docs/x.pdf')"``) while the ``href`` is an inert
placeholder. Everything that knows about that markup lives here so upstream
markup changes touch only this module.
"""

import re
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

# newwindow('...'), newwindow1("..."), window.open('...')
WINDOW_OPEN_PATTERN = re.compile(
    r"""(?:newwindow\d*|window\.open)\s*\(\s*['"]([^'"]+)['"]""",
    re.IGNORECASE,
)

INERT_HREFS = frozenset({"", "#", "#!", "/#"})


def is_inert_href(href: Optional[str]) -> bool:
    """True when an href is absent or a no-op trigger."""
    if href is None:
        return True
    value = href.strip()
    return value.lower() in INERT_HREFS or value.lower().startswith("javascript:")


def extract_handler_url(handler: Optional[str]) -> str:
    """Pull the quoted URL argument out of a window-opening handler call.

    Args:
        handler: Inline event-handler source, e.g. ``newwindow1('/x.pdf')``

    Returns:
        The captured URL (trimmed), or empty string when no call matches
    """
    if not handler:
        return ""
    match = WINDOW_OPEN_PATTERN.search(handler)
    return match.group(1).strip() if match else ""


def pick_anchor_link(anchor: Optional[Tag]) -> str:
    """Choose the link target of an anchor element.

    The ``href`` wins unless it is inert; then the ``onclick`` handler is
    parsed. Returns the raw (possibly relative) target or empty string.
    """
    if anchor is None:
        return ""
    href = anchor.get("href")
    if not is_inert_href(href):
        return href.strip()
    return extract_handler_url(anchor.get("onclick"))


def find_link(fragment: Union[Tag, str, None]) -> str:
    """Find a link inside a table cell or a markup fragment.

    Accepts a parsed cell, a markup string such as
    ``<a onclick="window.open('/docs/formg.pdf')">``, or plain text that
    already is a link target.
    """
    if fragment is None:
        return ""
    if isinstance(fragment, str):
        if "<" not in fragment:
            return fragment.strip()
        fragment = BeautifulSoup(fragment, "html.parser")

    if fragment.name == "a":
        return pick_anchor_link(fragment)

    for anchor in fragment.find_all("a"):
        link = pick_anchor_link(anchor)
        if link:
            return link
    return ""


def resolve_link(origin: str, link: Optional[str]) -> str:
    """Make a link absolute against the site origin.

    Absolute http(s) links are returned unchanged. Relative links are joined
    to the origin with exactly one ``/`` between them.

    Example:
        >>> resolve_link("https://ibbi.gov.in", "x/y")
        'https://ibbi.gov.in/x/y'
    """
    if not link:
        return ""
    link = link.strip()
    if not link:
        return ""
    if link.lower().startswith(("http://", "https://")):
        return link
    if link.startswith("//"):
        scheme = origin.split(":", 1)[0] if ":" in origin else "https"
        return f"{scheme}:{link}"
    base = origin.rstrip("/")
    return f"{base}{link}" if link.startswith("/") else f"{base}/{link}"
