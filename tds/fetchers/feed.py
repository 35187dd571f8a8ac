"""
RSS feed fetcher for TDS.
"""
import logging
from datetime import date
from typing import Iterable, List, Optional
from urllib.parse import urlparse

import feedparser
import requests
from bs4 import BeautifulSoup

from tds.config import get_config
from tds.core.article import FeedEntry
from tds.core.errors import FeedUnavailable
from tds.utils.dates import parse_feed_date

# Configure logging
logger = logging.getLogger(__name__)


class RssFeed:
    """
    Fetches the news feed and turns its items into FeedEntry objects.
    """
    def __init__(self, url: Optional[str] = None, origin: Optional[str] = None,
                 timeout: Optional[float] = None):
        """
        Initialize the RssFeed.

        Args:
            url: URL of the RSS feed
            origin: Host of the feed's own site; links there are not articles
            timeout: Request timeout in seconds
        """
        self.url = url or get_config('feed.url')
        self.origin = origin or get_config('feed.origin') or urlparse(self.url).hostname
        self.timeout = timeout or get_config('http.timeout', 20)

    def get_entries(self) -> List[FeedEntry]:
        """
        Fetch and parse the feed.

        Returns:
            All entries in the feed

        Raises:
            FeedUnavailable: If the feed can't be fetched or parsed
        """
        logger.info(f"Fetching feed: {self.url}")
        try:
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FeedUnavailable(f"failed to get RSS feed {self.url}: {e}") from e

        entries = parse_feed(response.content, self.origin)
        logger.info(f"Extracted {len(entries)} entries from feed")
        return entries


def parse_feed(feed: bytes, origin: str) -> List[FeedEntry]:
    """
    Parse an RSS document.

    Args:
        feed: The raw feed
        origin: Host whose links are dropped from the entries

    Returns:
        List of FeedEntry objects

    Raises:
        FeedUnavailable: If the document is not a feed
    """
    parsed = feedparser.parse(feed)
    if parsed.bozo and not parsed.entries:
        raise FeedUnavailable(f"failed to parse RSS feed: {parsed.get('bozo_exception')}")

    entries = []
    for item in parsed.entries:
        description = item.get('summary') or "<No description>"
        published = item.get('published')
        published_at = parse_feed_date(published)
        if published and published_at is None:
            logger.debug(f"Ignoring invalid pubDate {published!r}")

        entries.append(FeedEntry(
            title=item.get('title') or "<Untitled>",
            date=published_at,
            description=description,
            links=tuple(parse_article_links(description, origin)),
        ))
    return entries


def parse_article_links(description: str, origin: str) -> List[str]:
    """
    Get the article links from an entry description.

    Links to the feed's own site are ignored. The same article is sometimes
    linked more than once, so duplicates are removed, keeping the first.

    Args:
        description: HTML of the entry description
        origin: Host of the feed's own site

    Returns:
        Article URLs in order of first appearance
    """
    soup = BeautifulSoup(description, 'html.parser')

    links = []
    for a in soup.find_all('a', href=True):
        href = a['href'].strip()
        if not href or is_origin_link(href, origin) or href in links:
            continue
        links.append(href)
    return links


def is_origin_link(href: str, origin: str) -> bool:
    try:
        host = urlparse(href).hostname
    except ValueError:
        return False
    if not host or not origin:
        return False
    host = host.lower()
    origin = origin.lower()
    return host == origin or host.endswith('.' + origin)


def filter_entries(entries: Iterable[FeedEntry], day: date) -> List[FeedEntry]:
    """
    Keep the entries added to the feed on ``day`` (local time).
    """
    return [
        entry for entry in entries
        if entry.date is not None and entry.date.astimezone().date() == day
    ]
