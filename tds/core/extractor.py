"""
Article extraction for TDS.

Locating the article body goes through three tiers, in order:

1. a site rule from ``SITE_RULES``, chosen by the page's site key
2. the generic extractor (readability + trafilatura by default)
3. density scoring of ``<div>`` elements by the text in their paragraphs

The located node is then filtered (boilerplate, lazy images, relative links)
and serialized. Title, authors and date not supplied by a site rule are
filled in from the generic extractor.
"""
import ipaddress
import logging
from typing import Dict, List, Optional, Tuple, TypeVar
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from tds.core.article import Article, ContentCandidate
from tds.core.diagnostics import Diagnostics
from tds.core.errors import ContentNotFound
from tds.core.generic import DefaultExtractor, GenericExtractor
from tds.core.sites import SITE_RULES
from tds.filters import do_global_filtering
from tds.utils.dates import to_calendar_date

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NOT_SEARCHED = object()


class ArticleExtractor:
    """
    Extracts one article from one parsed page.

    An instance owns its document for the duration of the extraction and
    should not be reused for another page.
    """
    def __init__(self, document: BeautifulSoup, url: str,
                 extractor: Optional[GenericExtractor] = None,
                 diagnostics: Optional[Diagnostics] = None,
                 client=None,
                 language: str = "en"):
        """
        Args:
            document: The parsed page
            url: URL the page was fetched from
            extractor: Generic extractor; a DefaultExtractor if omitted
            diagnostics: Collector for non-fatal warnings
            client: HTTP client used to probe lazy-loaded images
            language: Language hint for the generic extractor
        """
        self.document = document
        self.url = url
        self.extractor = extractor if extractor is not None else DefaultExtractor()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.client = client
        self.language = language
        self._default_node = _NOT_SEARCHED

    async def extract(self) -> Article:
        """
        Extract the article.

        Returns:
            The finished Article

        Raises:
            ContentNotFound: If no article node could be located
        """
        parts = self.extract_article_parts()

        html = await self.article_html(parts.article_node)

        title = parts.title if parts.title is not None else self.default_title()

        publishing_date = (
            to_calendar_date(parts.publishing_date)
            if parts.publishing_date is not None
            else self.default_publishing_date()
        )

        authors = parts.authors if parts.authors is not None else self.default_authors()

        return Article(
            url=self.url,
            title=title or self.url,
            authors=list(authors),
            publishing_date=publishing_date,
            html=html,
        )

    def extract_article_parts(self) -> ContentCandidate:
        rule = SITE_RULES.get(site_domain(self.url) or "")
        if rule is None:
            return ContentCandidate()

        logger.debug(f"Using {rule.name} rule for {self.url}")
        return rule.extract(self) or ContentCandidate()

    async def article_html(self, article_node: Optional[Tag]) -> str:
        node = article_node if article_node is not None else self.default_article_node()
        if node is None:
            raise ContentNotFound(self.url)

        await do_global_filtering(node, self.url, self.client)

        return node_to_html(node)

    def default_article_node(self) -> Optional[Tag]:
        """
        Find the article node with the generic extractor, falling back on
        density scoring. The result is computed once.
        """
        if self._default_node is _NOT_SEARCHED:
            node = self.warn(
                self.extractor.article_node(self.document, self.language),
                "generic extractor found no article node",
            )
            if node is None:
                scores = score_divs(self.document)
                node = scores[0][0] if scores and scores[0][1] > 0 else None
            self._default_node = node
        return self._default_node

    def default_title(self) -> Optional[str]:
        return self.extractor.title(self.document)

    def default_authors(self) -> List[str]:
        return self.extractor.authors(self.document)

    def default_publishing_date(self) -> Optional[str]:
        return to_calendar_date(self.extractor.publishing_date(self.document, self.url))

    def warn(self, value: Optional[T], message: str) -> Optional[T]:
        """Record ``message`` as a warning for this page if ``value`` is None."""
        return self.diagnostics.check(value, self.url, message)


async def extract(document: BeautifulSoup, source_url: str, **kwargs) -> Article:
    """
    Extract the article in ``document``.

    Keyword arguments are passed to ``ArticleExtractor``.

    Raises:
        ContentNotFound: If no article node could be located
    """
    return await ArticleExtractor(document, source_url, **kwargs).extract()


def score_divs(document: Tag) -> List[Tuple[Tag, int]]:
    """
    Score every ``<div>`` by the amount of paragraph text it holds.

    Each ``<p>`` counts toward its nearest ``<div>`` ancestor; paragraphs
    without one are ignored. The result is sorted by score, highest first,
    with ties kept in document order.
    """
    scores: Dict[int, Tuple[Tag, int]] = {}

    for p in document.find_all("p"):
        div = p.find_parent("div")
        if div is None:
            continue
        _, score = scores.get(id(div), (div, 0))
        scores[id(div)] = (div, score + len(p.get_text()))

    return sorted(scores.values(), key=lambda entry: -entry[1])


def site_domain(url: str) -> Optional[str]:
    """
    The site key of ``url``: the last two labels of its host name.

    ``www.theguardian.com`` gives ``theguardian.com``. Hosts under two-label
    public suffixes collapse onto the suffix (``www.bbc.co.uk`` gives
    ``co.uk``). IP addresses have no site key.
    """
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host or is_ip_address(host):
        return None
    labels = host.lower().split(".")
    if len(labels) < 2:
        return None
    return f"{labels[-2]}.{labels[-1]}"


def is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def node_to_html(node: Tag) -> str:
    """
    Serialize ``node`` without any document wrapper around it.
    """
    if isinstance(node, BeautifulSoup):
        body = node.body
        return (body if body is not None else node).decode_contents()
    return str(node)
