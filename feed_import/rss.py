"""Feed fetching module for the CLI release feed import."""

from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlparse

import feedparser
import requests
from bs4 import BeautifulSoup
from dateutil import parser as date_parser

from .logging_config import create_execution_logger
from .models import FeedParseError

BLOCK_TAGS = [
    "p", "h1", "h2", "h3", "h4", "h5", "h6", "br", "li", "ul", "ol",
    "div", "blockquote", "pre", "section", "table", "tr",
]


class FeedFetcher:
    """Downloads a releases feed and normalizes its entries into plain dicts."""

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = "CLI-Feed-Import/1.0 (GitHub releases importer)",
        execution_id: str | None = None,
    ):
        """Initialize FeedFetcher with configuration.

        Args:
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header sent with the request
            execution_id: Execution ID for logging context
        """
        self.timeout = timeout
        self.logger = create_execution_logger("feed_fetcher", execution_id)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

        self.logger.info("FeedFetcher initialized", timeout=timeout)

    def fetch_releases(self, feed_url: str) -> list[dict[str, Any]]:
        """Download and parse a releases feed.

        Args:
            feed_url: URL of the Atom/RSS feed

        Returns:
            Raw entries in feed order (newest first for GitHub release feeds)

        Raises:
            ValueError: If the feed URL is not HTTPS
            requests.RequestException: If the download fails
            FeedParseError: If the body cannot be parsed into entries
        """
        parsed_url = urlparse(feed_url)
        if parsed_url.scheme != "https":
            error_msg = f"Feed URL must use HTTPS protocol: {feed_url}"
            self.logger.error(error_msg, feed_url=feed_url, scheme=parsed_url.scheme)
            raise ValueError(error_msg)

        try:
            self.logger.info("Downloading feed content", feed_url=feed_url)
            response = self.session.get(feed_url, timeout=self.timeout)
            response.raise_for_status()
            self.logger.info(
                "Feed downloaded successfully",
                feed_url=feed_url,
                status_code=response.status_code,
                content_length=len(response.content),
            )
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download feed {feed_url}: {e}",
                feed_url=feed_url,
                error=str(e),
            )
            raise

        entries = self.parse_feed_content(response.content, feed_url)
        self.logger.log_feed_processing(feed_url, len(entries))
        return entries

    def parse_feed_content(
        self, content: bytes | str, feed_url: str = ""
    ) -> list[dict[str, Any]]:
        """Parse a feed body and normalize every entry.

        A body feedparser flags as malformed is only fatal when it yields no
        entries; otherwise the problem is logged and the entries are used.
        """
        feed = feedparser.parse(content)

        if feed.bozo:
            bozo_exception = str(getattr(feed, "bozo_exception", "unknown error"))
            if not feed.entries and not feed.get("version"):
                self.logger.error(
                    f"Unable to parse feed {feed_url}: {bozo_exception}",
                    feed_url=feed_url,
                    bozo_exception=bozo_exception,
                )
                raise FeedParseError(f"Unable to parse feed {feed_url}: {bozo_exception}")
            self.logger.warning(
                f"Feed parsing warning for {feed_url}: {bozo_exception}",
                feed_url=feed_url,
                bozo_exception=bozo_exception,
            )

        return [self.normalize_entry(entry) for entry in feed.entries]

    def normalize_entry(self, entry: Any) -> dict[str, Any]:
        """Normalize a feedparser entry into a JSON-serializable dict.

        Args:
            entry: Raw feed entry from feedparser

        Returns:
            Dict with title, link, pubDate, isoDate, id, author, content
            and contentSnippet keys
        """
        pub_date = _first_present(entry, "published", "updated")
        published = parse_publish_date(pub_date)
        if pub_date and published is None:
            self.logger.warning(
                f"Unparseable publish date: {pub_date}", pub_date=pub_date
            )
        iso_date = (
            published.isoformat().replace("+00:00", "Z") if published else None
        )

        content = ""
        raw_content = getattr(entry, "content", None)
        if isinstance(raw_content, list) and raw_content:
            content = raw_content[0].get("value", "") or ""
        elif raw_content:
            content = str(raw_content)
        if not content:
            content = _first_present(entry, "summary", "description") or ""

        return {
            "title": getattr(entry, "title", None) or "",
            "link": getattr(entry, "link", None) or "",
            "pubDate": pub_date,
            "isoDate": iso_date,
            "id": _first_present(entry, "id", "guid"),
            "author": getattr(entry, "author", None),
            "content": content,
            "contentSnippet": self.content_snippet(content),
        }

    def content_snippet(self, content: str | None) -> str:
        """Strip HTML from content while keeping its line structure.

        Args:
            content: Raw content that may contain HTML

        Returns:
            Plain text with leading and trailing whitespace removed
        """
        if not content:
            return ""

        if "<" not in content and ">" not in content:
            return content.strip()

        soup = BeautifulSoup(content, "html.parser")

        for script in soup(["script", "style"]):
            script.decompose()

        # Block elements end a line even when the markup has no newline
        for block in soup(BLOCK_TAGS):
            block.insert_after("\n")

        lines = (line.strip() for line in soup.get_text().split("\n"))
        return "\n".join(line for line in lines if line)


def _first_present(entry: Any, *names: str) -> str | None:
    for name in names:
        value = getattr(entry, name, None)
        if value:
            return value
    return None


def parse_publish_date(value: str | None) -> datetime | None:
    """Parse a feed publish date into an aware UTC datetime, or None."""
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
