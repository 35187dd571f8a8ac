"""Tests for the command-line entry point."""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, patch

from tds import cli
from tds.core.article import Article, FeedEntry, ResolvedItem
from tds.core.errors import FeedUnavailable


def test_output_file_in_directory(tmp_path) -> None:
    assert cli.output_file(str(tmp_path)) == tmp_path / "tds.html"


def test_output_file_explicit_path(tmp_path) -> None:
    assert cli.output_file(str(tmp_path / "digest.html")) == tmp_path / "digest.html"


def test_parse_args() -> None:
    args = cli.parse_args(["-o", "out.html", "--yesterday", "-v"])
    assert args.output == "out.html"
    assert args.yesterday
    assert args.verbose
    assert not args.open
    assert args.debug is None


def test_main_writes_page_in_feed_order(tmp_path) -> None:
    now = datetime.now().astimezone()
    first = FeedEntry("first", now, "<p>first comment</p>", ("https://a.com/1",))
    second = FeedEntry("second", now, "<p>second comment</p>", ("https://b.com/2",))
    article = Article("https://b.com/2", "B", [], None, "<p>b</p>")

    # Completion order differs from feed order
    resolved = [ResolvedItem(second, [article]), ResolvedItem(first, [])]
    output = tmp_path / "page.html"

    with patch("tds.cli.load_dotenv"), \
            patch("tds.cli.RssFeed") as feed, \
            patch("tds.cli.resolve_items", new=AsyncMock(return_value=resolved)):
        feed.return_value.get_entries.return_value = [first, second]
        code = asyncio.run(cli.async_main(["-o", str(output)]))

    assert code == 0
    page = output.read_text(encoding="utf-8")
    assert page.index("first comment") < page.index("second comment")
    assert "<h1>B</h1>" in page


def test_main_fails_when_feed_is_unavailable(tmp_path) -> None:
    with patch("tds.cli.load_dotenv"), patch("tds.cli.RssFeed") as feed:
        feed.return_value.get_entries.side_effect = FeedUnavailable("failed to get RSS feed")
        code = asyncio.run(cli.async_main(["-o", str(tmp_path)]))

    assert code == 1
    assert not (tmp_path / "tds.html").exists()
