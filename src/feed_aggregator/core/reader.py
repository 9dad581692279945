"""
RSS/Atom source reader built on httpx and feedparser.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlparse

import feedparser
import httpx

from feed_aggregator.config import get_config
from feed_aggregator.core.interfaces import SourceReader
from feed_aggregator.exceptions import InvalidSourceError
from feed_aggregator.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FeedDocument:
    """A parsed syndication document."""

    url: str
    version: str
    title: Optional[str] = None
    entries: list = field(default_factory=list)
    http_status: Optional[int] = None
    fetch_time_seconds: float = 0.0


class FeedReader(SourceReader):
    """Reads RSS/Atom feeds over HTTP.

    Timeouts, network errors and 5xx responses are retried up to
    ``max_retries`` times. Client errors and documents that feedparser
    does not recognise as a feed fail immediately with
    :class:`InvalidSourceError`.
    """

    def __init__(
        self,
        timeout_seconds: Optional[int] = None,
        max_retries: Optional[int] = None,
        user_agent: Optional[str] = None,
        retry_delay_seconds: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize feed reader.

        Args:
            timeout_seconds: Request timeout in seconds
            max_retries: Maximum number of retry attempts for transient errors
            user_agent: User-Agent header for HTTP requests
            retry_delay_seconds: Base delay between retries (multiplied by attempt)
            transport: Optional httpx transport (used by tests)
        """
        config = get_config().fetcher

        self.timeout_seconds = timeout_seconds or config.timeout_seconds
        self.max_retries = config.max_retries if max_retries is None else max_retries
        self.user_agent = user_agent or config.user_agent
        self.retry_delay_seconds = (
            config.retry_delay_seconds if retry_delay_seconds is None else retry_delay_seconds
        )
        self.follow_redirects = config.follow_redirects
        self.max_redirects = config.max_redirects
        self._transport = transport

    def read(self, url: str) -> list[Any]:
        return self.read_feed(url).entries

    def read_feed(self, url: str) -> FeedDocument:
        """Fetch and parse the feed at ``url``.

        Raises:
            InvalidSourceError: If the URL is malformed, unreachable or not a feed
        """
        self._validate_url(url)

        start_time = time.time()
        last_error: Optional[str] = None

        for attempt in range(self.max_retries + 1):
            try:
                response = self._fetch_http(url)
                return self._parse(url, response, time.time() - start_time)

            except httpx.TimeoutException as e:
                last_error = f"Timeout: {e}"
                logger.warning(f"Timeout reading {url} (attempt {attempt + 1}/{self.max_retries + 1})")

            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                last_error = f"HTTP {status}"
                if 400 <= status < 500:
                    logger.error(f"Client error reading {url}: {last_error}")
                    raise InvalidSourceError(url, last_error) from e
                logger.warning(f"Server error reading {url} (attempt {attempt + 1})")

            except httpx.InvalidURL as e:
                logger.error(f"Invalid URL {url!r}: {e}")
                raise InvalidSourceError(url, f"Invalid URL: {e}") from e

            except httpx.RequestError as e:
                last_error = f"Request error: {e}"
                logger.warning(f"Network error reading {url} (attempt {attempt + 1})")

            if attempt < self.max_retries:
                time.sleep(self.retry_delay_seconds * (attempt + 1))

        raise InvalidSourceError(url, last_error)

    def _validate_url(self, url: str) -> None:
        try:
            parsed = urlparse(url or "")
        except ValueError as e:
            raise InvalidSourceError(url, f"Invalid URL format: {e}") from e

        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidSourceError(url, "Invalid URL format")

    def _fetch_http(self, url: str) -> httpx.Response:
        """Fetch URL with HTTP client.

        Raises:
            httpx.TimeoutException: On timeout
            httpx.HTTPStatusError: On HTTP error
            httpx.RequestError: On network error
            httpx.InvalidURL: If httpx rejects the URL
        """
        with httpx.Client(
            timeout=self.timeout_seconds,
            follow_redirects=self.follow_redirects,
            max_redirects=self.max_redirects,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            return response

    def _parse(self, url: str, response: httpx.Response, elapsed: float) -> FeedDocument:
        parsed = feedparser.parse(response.content)

        # feedparser leaves version empty for anything that is not RSS/Atom
        if not parsed.get("version"):
            reason = str(parsed.get("bozo_exception") or "Not an RSS/Atom document")
            logger.error(f"Invalid feed at {url}: {reason}")
            raise InvalidSourceError(url, reason)

        entries = list(parsed.get("entries", []))
        logger.info(f"Read {len(entries)} entries from {url} in {elapsed:.2f}s")

        return FeedDocument(
            url=url,
            version=parsed.version,
            title=parsed.feed.get("title"),
            entries=entries,
            http_status=response.status_code,
            fetch_time_seconds=elapsed,
        )
