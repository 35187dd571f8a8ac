"""
Fetch and extract the articles linked from feed entries.
"""
import asyncio
import logging
from typing import Callable, Iterable, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from tqdm import tqdm

from tds.config import get_config
from tds.core.article import Article, FeedEntry, ResolvedItem
from tds.core.diagnostics import Diagnostics
from tds.core.errors import ParseFailed, TdsError
from tds.core.extractor import extract
from tds.core.generic import DefaultExtractor, GenericExtractor
from tds.utils.http import HttpClient

logger = logging.getLogger(__name__)

MAX_CONCURRENT_ENTRIES = 8


async def resolve_items(entries: Iterable[FeedEntry],
                        client: Optional[HttpClient] = None,
                        max_concurrent: Optional[int] = None,
                        diagnostics: Optional[Diagnostics] = None,
                        extractor_factory: Callable[[], GenericExtractor] = DefaultExtractor,
                        progress: bool = True) -> List[ResolvedItem]:
    """
    Resolve the articles of every entry.

    Entries are processed concurrently, at most ``max_concurrent`` at a time.
    The links of one entry are fetched one after the other. Links that fail
    are logged and left out; this function itself does not fail.

    Args:
        entries: Feed entries to resolve
        client: Shared HTTP client; one is created (and closed) if omitted
        max_concurrent: Number of entries processed at the same time
        diagnostics: Collector for extractor warnings
        extractor_factory: Builds the generic extractor used for each page
        progress: Show a progress bar

    Returns:
        One ResolvedItem per entry, in completion order
    """
    entries = list(entries)
    owns_client = client is None
    if owns_client:
        client = HttpClient()
    if diagnostics is None:
        diagnostics = Diagnostics(get_config('diagnostics.verbose', False))
    semaphore = asyncio.Semaphore(max_concurrent or get_config('http.concurrency', MAX_CONCURRENT_ENTRIES))

    async def resolve_with_semaphore(entry: FeedEntry) -> ResolvedItem:
        async with semaphore:
            articles = await fetch_articles(client, entry.links, diagnostics, extractor_factory)
            return ResolvedItem(entry=entry, articles=articles)

    tasks = [resolve_with_semaphore(entry) for entry in entries]
    resolved = []

    try:
        for task in tqdm(
            asyncio.as_completed(tasks),
            total=len(tasks),
            desc="Resolving items",
            disable=not progress
        ):
            resolved.append(await task)
    finally:
        if owns_client:
            await client.close()

    return resolved


async def fetch_articles(client: HttpClient, links: Iterable[str],
                         diagnostics: Optional[Diagnostics] = None,
                         extractor_factory: Callable[[], GenericExtractor] = DefaultExtractor) -> List[Article]:
    """
    Fetch and extract ``links`` in order, skipping the ones that fail.
    """
    articles = []
    for link in links:
        try:
            article = await fetch_article(client, link, diagnostics, extractor_factory())
        except TdsError as e:
            logger.warning(f"{link} ... Error: {e} - skipping article")
            continue
        except Exception as e:
            logger.warning(f"{link} ... Unexpected error: {e!r} - skipping article")
            continue

        logger.info(f"{link} ... Ok")
        articles.append(article)
    return articles


async def fetch_article(client: HttpClient, link: str,
                        diagnostics: Optional[Diagnostics] = None,
                        extractor: Optional[GenericExtractor] = None) -> Article:
    """
    Fetch one page and extract its article.

    Raises:
        ParseFailed: If the link or the page can't be parsed
        FetchFailed: If the page can't be fetched
        ContentNotFound: If the page has no recognizable article
    """
    check_url(link)
    body = await client.get(link)
    document = parse_document(body, link)
    return await extract(document, link, extractor=extractor, diagnostics=diagnostics, client=client)


def check_url(link: str) -> None:
    try:
        parsed = urlparse(link)
    except ValueError as e:
        raise ParseFailed(f"invalid url {link!r}: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ParseFailed(f"not an http(s) url: {link!r}")


def parse_document(body: bytes, url: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(body, "html.parser")
    except ParserRejectedMarkup as e:
        raise ParseFailed(f"could not parse {url}: {e}") from e
