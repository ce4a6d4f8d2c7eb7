"""HTTP fetcher for the regulator's pages.

The source site presents a certificate chain that fails strict validation and
filters clients that do not look like a browser, so the fetcher:

- disables TLS certificate verification unless configured otherwise
- sends a desktop-browser header set (user agent, accept, sec-fetch)
- bounds each fetch by one overall deadline and never retries

``requests`` applies its ``timeout`` to the connect and to each socket read,
so a server trickling bytes could outlast it. The body is therefore streamed
and the fetch fails once the whole request has taken longer than ``timeout``.
"""

import logging
import threading
import time
from typing import Dict, Optional

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from ibbi_tracker.config.models import DEFAULT_BROWSER_HEADERS, DEFAULT_USER_AGENT, HttpConfig
from ibbi_tracker.logging import get_logger

from .exceptions import FetchTimeoutError, HTTPStatusError, NetworkError

logger = get_logger(__name__, component="fetcher")

CHUNK_SIZE = 16 * 1024


class Fetcher:
    """Retrieves documents by URL with browser-like headers.

    A single failed attempt terminates the call; retry policy, if any,
    belongs to the caller. Each thread gets its own ``requests.Session``
    built from the same settings, so concurrent extractors share no cookie
    jar or connection pool. A session passed in explicitly is used as-is by
    every thread.

    Attributes:
        timeout: Overall deadline per fetch in seconds
        verify_tls: Whether to validate server certificates
    """

    def __init__(
        self,
        timeout: float = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[Dict[str, str]] = None,
        verify_tls: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            timeout: Overall deadline per fetch in seconds (must be positive)
            user_agent: User-Agent header value
            headers: Additional request headers (default: browser header set)
            verify_tls: Validate TLS certificates (default False for the source site)
            session: Optional pre-built requests session (mainly for tests)

        Raises:
            ValueError: If timeout is not positive or user_agent is empty
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got: {timeout}")
        if not user_agent or not user_agent.strip():
            raise ValueError("user_agent cannot be empty")

        self.timeout = timeout
        self.verify_tls = verify_tls
        self._headers = dict(headers if headers is not None else DEFAULT_BROWSER_HEADERS)
        self._headers["User-Agent"] = user_agent.strip()
        self._local = threading.local()
        self._shared_session = self._configure(session) if session is not None else None
        if not verify_tls:
            urllib3.disable_warnings(InsecureRequestWarning)

    @classmethod
    def from_config(cls, http_config: HttpConfig, session: Optional[requests.Session] = None) -> "Fetcher":
        """Build a fetcher from the ``http`` configuration section."""
        return cls(
            timeout=http_config.timeout,
            user_agent=http_config.user_agent,
            headers=http_config.headers,
            verify_tls=http_config.verify_tls,
            session=session,
        )

    @property
    def session(self) -> requests.Session:
        """The calling thread's session."""
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._configure(requests.Session())
            self._local.session = session
        return session

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def _configure(self, session: requests.Session) -> requests.Session:
        session.headers.update(self._headers)
        session.verify = self.verify_tls
        return session

    def fetch(self, url: str) -> str:
        """Fetch a document and return its text.

        Args:
            url: Absolute URL to fetch

        Returns:
            Decoded response body

        Raises:
            FetchTimeoutError: Request exceeded the timeout
            NetworkError: Connection refused, DNS failure or TLS failure
            HTTPStatusError: Server answered with a 4xx/5xx status
        """
        logger.debug(
            f"HTTP GET {url}",
            extra={"event": "fetch.request", "url": url, "timeout": self.timeout},
        )

        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
        except requests.exceptions.Timeout as e:
            raise self._timeout_error(url) from e
        except requests.exceptions.RequestException as e:
            raise self._network_error(url, e) from e

        try:
            if response.status_code >= 400:
                log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
                logger.log(
                    log_level,
                    f"HTTP {response.status_code} error from {url}",
                    extra={"event": "fetch.error", "status_code": response.status_code, "url": url},
                )
                raise HTTPStatusError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                )
            text = self._read_text(response, url, deadline)
        finally:
            response.close()

        logger.debug(
            "HTTP request succeeded",
            extra={
                "event": "fetch.succeeded",
                "status_code": response.status_code,
                "url": url,
                "length": len(text),
            },
        )
        return text

    def _read_text(self, response: requests.Response, url: str, deadline: float) -> str:
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise self._timeout_error(url)
        except requests.exceptions.Timeout as e:
            raise self._timeout_error(url) from e
        except requests.exceptions.RequestException as e:
            raise self._network_error(url, e) from e

        # requests already maps text/* without a charset to ISO-8859-1
        body = b"".join(chunks)
        try:
            return body.decode(response.encoding or "utf-8", errors="replace")
        except LookupError:
            return body.decode("utf-8", errors="replace")

    def _timeout_error(self, url: str) -> FetchTimeoutError:
        logger.warning(
            f"Request to {url} timed out after {self.timeout} seconds",
            extra={"event": "fetch.error", "error_type": "Timeout", "url": url},
        )
        return FetchTimeoutError(
            f"Request to {url} timed out after {self.timeout} seconds",
            url=url,
            timeout=self.timeout,
        )

    def _network_error(self, url: str, error: Exception) -> NetworkError:
        logger.warning(
            f"Request to {url} failed: {error}",
            extra={"event": "fetch.error", "error_type": type(error).__name__, "url": url},
        )
        return NetworkError(f"Request to {url} failed: {error}", url=url)
