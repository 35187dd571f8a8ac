"""
Data models for TDS.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

from bs4 import Tag


@dataclass(frozen=True)
class FeedEntry:
    """
    A news item from the feed.

    ``date`` is when the item was added to the feed, not when the linked
    articles were written. ``description`` is the commentary and also carries
    the article links.
    """
    title: str
    date: Optional[datetime]
    description: str
    links: Tuple[str, ...] = ()


@dataclass
class ContentCandidate:
    """
    A possibly partial extraction result.

    ``None`` in any field means "not determined, use the generic extractor".
    An empty list or string is an explicit answer and is kept.
    """
    title: Optional[str] = None
    authors: Optional[List[str]] = None
    publishing_date: Optional[str] = None
    article_node: Optional[Tag] = None

    @classmethod
    def with_article(cls, node: Tag) -> "ContentCandidate":
        return cls(article_node=node)


@dataclass
class ImageResource:
    """
    Result of probing an image URL.
    """
    url: str
    size_bytes: int
    mime: str

    @property
    def is_image(self) -> bool:
        return self.mime.startswith("image")


@dataclass
class Article:
    """
    An extracted article, detached from the page it came from.
    """
    url: str
    title: str
    authors: List[str]
    publishing_date: Optional[str]
    html: str


@dataclass
class ResolvedItem:
    """
    A feed entry with the articles that could be extracted from its links.
    """
    entry: FeedEntry
    articles: List[Article] = field(default_factory=list)
