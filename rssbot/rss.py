"""Feed fetching and parsing for RSS Telegram relay."""

from xml.sax import SAXException

import feedparser
import requests
from bs4 import BeautifulSoup

from .config import DEFAULT_REQUEST_TIMEOUT
from .errors import FetchError, ParseError
from .logging_config import create_execution_logger
from .models import Feed, FeedItem

USER_AGENT = "RSS-Telegram-Relay/1.0"


class FeedClient:
    """Downloads a feed and normalizes its entries into a Feed."""

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        execution_id: str | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize FeedClient.

        Args:
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
            session: Optional preconfigured requests session
        """
        self.timeout = timeout
        self.logger = create_execution_logger("feed_client", execution_id)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch(self, url: str) -> Feed:
        """Fetch and parse the feed at ``url``.

        Args:
            url: URL of the RSS/Atom feed

        Returns:
            Feed with items in source order (newest first)

        Raises:
            FetchError: If the download fails or times out
            ParseError: If the body is not a feed or is malformed XML
        """
        self.logger.info("Downloading feed", feed_url=url)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download feed {url}: {e}", feed_url=url, error=str(e)
            )
            raise FetchError(f"Failed to download feed {url}: {e}") from e

        feed = self.parse(response.content, url)
        self.logger.info(f"Fetched {len(feed)} items", feed_url=url)
        return feed

    def parse(self, content: bytes | str, feed_url: str = "") -> Feed:
        """Parse raw feed content.

        Args:
            content: Feed document
            feed_url: Source URL, for logging only

        Returns:
            Feed with items in document order

        Raises:
            ParseError: If the content is not a feed or is malformed XML
        """
        # Leading whitespace before the XML declaration breaks parsing
        content = content.lstrip()
        parsed = feedparser.parse(content)

        if not parsed.entries and not parsed.get("version"):
            reason = parsed.get("bozo_exception") or "no feed found in document"
            self.logger.error(
                f"Unparseable feed {feed_url}: {reason}",
                feed_url=feed_url,
                error=str(reason),
            )
            raise ParseError(f"Unparseable feed {feed_url}: {reason}")

        bozo_exception = parsed.get("bozo_exception")
        if isinstance(bozo_exception, SAXException):
            # Entries recovered from broken XML may stop short of the marker
            self.logger.error(
                f"Malformed feed {feed_url}: {bozo_exception}",
                feed_url=feed_url,
                error=str(bozo_exception),
            )
            raise ParseError(f"Malformed feed {feed_url}: {bozo_exception}")

        if parsed.bozo:
            self.logger.warning(
                f"Feed parsing warning for {feed_url}: {bozo_exception}",
                feed_url=feed_url,
            )

        items = []
        for entry in parsed.entries:
            item = self.normalize_item(entry)
            if item is None:
                self.logger.warning(
                    "Skipping feed entry without link",
                    feed_url=feed_url,
                )
                continue
            items.append(item)

        return Feed(items=items)

    def normalize_item(self, entry) -> FeedItem | None:
        """Normalize a feedparser entry into a FeedItem.

        Returns:
            FeedItem, or None when the entry has no link
        """
        link = (entry.get("link") or "").strip()
        if not link:
            return None

        description = entry.get("summary") or entry.get("description") or ""

        category = None
        tags = entry.get("tags") or []
        if tags:
            category = (tags[0].get("term") or "").strip() or None

        return FeedItem(
            link=link,
            title=(entry.get("title") or "").strip() or None,
            description=self.clean_html_content(description) or None,
            category=category,
        )

    def clean_html_content(self, content: str | None) -> str:
        """Remove HTML tags from content and normalize whitespace.

        Args:
            content: Raw content that may contain HTML

        Returns:
            Clean text content without HTML tags
        """
        if not content:
            return ""

        if "<" in content or ">" in content:
            soup = BeautifulSoup(content, "html.parser")
            for script in soup(["script", "style"]):
                script.decompose()
            content = soup.get_text(separator=" ")

        return " ".join(content.split())

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
