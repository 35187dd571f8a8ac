"""
General purpose article extraction used when no site rule applies.
"""
import logging
from typing import List, Optional, Protocol

from bs4 import BeautifulSoup, Tag
from readability import Document as ReadabilityDocument
from readability.readability import Unparseable
from trafilatura.metadata import extract_metadata

from tds.utils.dates import to_calendar_date

logger = logging.getLogger(__name__)


class GenericExtractor(Protocol):
    """
    What the content locator needs from a general purpose extractor.

    Any object with these methods can be passed to ``ArticleExtractor``.
    """
    def article_node(self, document: BeautifulSoup, language: str = "en") -> Optional[Tag]:
        ...

    def title(self, document: BeautifulSoup) -> Optional[str]:
        ...

    def authors(self, document: BeautifulSoup) -> List[str]:
        ...

    def publishing_date(self, document: BeautifulSoup, url: Optional[str] = None) -> Optional[str]:
        ...


class DefaultExtractor:
    """
    Finds the article body with readability and the metadata with trafilatura.

    Metadata is extracted once per document and reused for title, authors
    and date.
    """
    def __init__(self):
        self._document = None
        self._url = None
        self._metadata = None

    def article_node(self, document: BeautifulSoup, language: str = "en") -> Optional[Tag]:
        """
        Locate the main content of ``document``.

        Readability's scoring does not depend on the language; ``language``
        is accepted so other extractors can use it.

        Returns:
            A copy of the article node, or None if nothing with text was found
        """
        try:
            summary = ReadabilityDocument(str(document)).summary(html_partial=True)
        except Unparseable as e:
            logger.debug(f"Readability could not parse document: {e}")
            return None

        node = BeautifulSoup(summary, "html.parser").find(True)
        if node is None or not node.get_text(strip=True):
            return None
        return node

    def title(self, document: BeautifulSoup) -> Optional[str]:
        metadata = self._metadata_for(document)
        return metadata.title if metadata is not None and metadata.title else None

    def authors(self, document: BeautifulSoup) -> List[str]:
        metadata = self._metadata_for(document)
        if metadata is None or not metadata.author:
            return []
        return [a.strip() for a in metadata.author.split(";") if a.strip()]

    def publishing_date(self, document: BeautifulSoup, url: Optional[str] = None) -> Optional[str]:
        metadata = self._metadata_for(document, url)
        if metadata is None:
            return None
        return to_calendar_date(metadata.date)

    def _metadata_for(self, document: BeautifulSoup, url: Optional[str] = None):
        # Dates that only appear in the page URL need a run that has the URL;
        # a cached run without one is redone once the URL is known
        stale = url is not None and url != self._url
        if document is not self._document or stale:
            self._document = document
            self._url = url
            self._metadata = extract_metadata(str(document), default_url=url)
        return self._metadata
