"""Custom exceptions for page fetching and row extraction."""


class ScraperError(Exception):
    """Base exception for all scraper errors.

    Catching this exception will catch any fetch failure that should be
    handled at the extractor level (degrade to an empty batch).
    """

    pass


class NetworkError(ScraperError):
    """Connection could not be established (refused, DNS, TLS handshake)."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class FetchTimeoutError(ScraperError):
    """Request did not complete within the fixed deadline."""

    def __init__(self, message: str, url: str, timeout: float) -> None:
        super().__init__(message)
        self.url = url
        self.timeout = timeout


class HTTPStatusError(ScraperError):
    """Server answered with a non-success status code."""

    def __init__(self, message: str, status_code: int, url: str) -> None:
        """Initialize HTTP error with status code and URL.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (e.g., 403, 503)
            url: URL that failed
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class MalformedRowError(ScraperError):
    """A table row lacks the required cells or its identifying field.

    Raised per row and swallowed by the row loop: such rows are page padding
    or decoration, not failures.
    """

    pass
