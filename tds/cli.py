"""
Command-line interface for TDS.
"""
import sys
import argparse
import asyncio
import logging
import tempfile
import webbrowser
from datetime import date, timedelta
from pathlib import Path
from pprint import pformat
from typing import List, Optional

from dotenv import load_dotenv

from tds.config import get_config, load_config
from tds.core.article import FeedEntry
from tds.core.diagnostics import Diagnostics
from tds.core.errors import FeedUnavailable
from tds.core.resolver import resolve_items
from tds.fetchers.feed import RssFeed, filter_entries
from tds.formatters.html import HtmlConverter

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """
    Configure logging for the command-line run.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def parse_args(argv: Optional[List[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="The Daily Stallman - News Digest Generator")
    parser.add_argument("-o", "--output", default=".",
                        help="Where the HTML output is written. If this is an existing directory, "
                             "the file is placed in it and named after output.filename")
    parser.add_argument("--yesterday", action="store_true",
                        help="Fetch yesterday's articles instead of today's")
    parser.add_argument("--open", action="store_true",
                        help="Write the page to a temporary file and open it in the browser")
    parser.add_argument("--debug", metavar="URL",
                        help="Extract a single article and print it instead of building the page")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show extractor warnings and debug logging")
    parser.add_argument("--config", help="Path to a YAML or JSON configuration file")
    return parser.parse_args(argv)


def output_file(output: str) -> Path:
    """
    Resolve the output argument to a file path.

    Relative paths are taken from the current directory. A directory gets
    the default file name appended.
    """
    path = Path(output)
    if not path.is_absolute():
        path = Path.cwd() / path
    if path.is_dir():
        path = path / get_config('output.filename', 'tds.html')
    return path


def write_output(page: str, output: str, open_browser: bool = False) -> Path:
    """
    Write the finished page to disk, or to a temporary file shown in the browser.

    Returns:
        Path of the written file
    """
    if open_browser:
        with tempfile.NamedTemporaryFile('w', suffix='.html', delete=False, encoding='utf-8') as f:
            f.write(page)
            path = Path(f.name)
        webbrowser.open(path.as_uri())
    else:
        path = output_file(output)
        path.write_text(page, encoding='utf-8')

    logger.info(f"Wrote {path}")
    return path


async def debug_article(url: str, diagnostics: Diagnostics) -> int:
    """
    Resolve one link and print the extracted article.
    """
    entry = FeedEntry(title="debug", date=None, description="", links=(url,))
    resolved = await resolve_items([entry], diagnostics=diagnostics, progress=False)
    articles = resolved[0].articles if resolved else []
    if not articles:
        logger.error(f"Could not extract an article from {url}")
        return 1
    print(pformat(articles[0]))
    return 0


async def async_main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the application.
    """
    load_dotenv(override=True)

    args = parse_args(argv)
    if args.config:
        load_config(args.config)

    verbose = args.verbose or bool(get_config('diagnostics.verbose', False))
    setup_logging(verbose)
    diagnostics = Diagnostics(verbose=verbose)

    if args.debug:
        return await debug_article(args.debug, diagnostics)

    logger.info("Starting The Daily Stallman")

    try:
        entries = RssFeed().get_entries()
    except FeedUnavailable as e:
        logger.error(f"Error: {e}")
        return 1

    day = date.today() - timedelta(days=1) if args.yesterday else date.today()
    entries = filter_entries(entries, day)
    logger.info(f"{len(entries)} entries from {day.isoformat()}")

    resolved = await resolve_items(entries, diagnostics=diagnostics)
    # Items complete in any order; show them in feed order
    position = {id(entry): i for i, entry in enumerate(entries)}
    resolved.sort(key=lambda item: position[id(item.entry)])

    article_count = sum(len(item.articles) for item in resolved)
    link_count = sum(len(item.entry.links) for item in resolved)
    logger.info(f"Extracted {article_count}/{link_count} articles")
    if diagnostics.warnings:
        logger.info(f"{len(diagnostics.warnings)} extractor warnings")

    page = HtmlConverter().render(resolved)
    write_output(page, args.output, args.open)
    return 0


def main():
    """
    Entry point for the command-line script.
    """
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"An error occurred: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
