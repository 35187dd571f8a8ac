"""Tests for tds.core.resolver."""

import asyncio
import logging

import pytest

from fakes import FakeClient, FakeExtractor
from tds.core.article import FeedEntry
from tds.core.diagnostics import Diagnostics
from tds.core.errors import ParseFailed
from tds.core.resolver import check_url, fetch_articles, resolve_items

GOOD_PAGE = '<html><body><div id="main"><p>Article text.</p></div></body></html>'


def resolve(entries, client, **kwargs):
    kwargs.setdefault("extractor_factory", lambda: FakeExtractor(node_selector="#main"))
    return asyncio.run(resolve_items(entries, client=client, progress=False, **kwargs))


class TestResolveItems:
    def test_failed_links_are_dropped(self, caplog) -> None:
        client = FakeClient(pages={
            "https://a.com/1": GOOD_PAGE,
            "https://c.com/3": GOOD_PAGE,
        })
        entry = FeedEntry("t", None, "d", links=("https://a.com/1", "https://b.com/404", "https://c.com/3"))

        with caplog.at_level(logging.INFO, logger="tds.core.resolver"):
            resolved = resolve([entry], client)

        assert len(resolved) == 1
        assert resolved[0].entry is entry
        assert [a.url for a in resolved[0].articles] == ["https://a.com/1", "https://c.com/3"]
        assert "https://b.com/404 ... Error:" in caplog.text
        assert "https://a.com/1 ... Ok" in caplog.text

    def test_links_are_fetched_in_order(self) -> None:
        links = tuple(f"https://site{n}.com/a" for n in range(5))
        client = FakeClient(pages={link: GOOD_PAGE for link in links})
        resolved = resolve([FeedEntry("t", None, "d", links=links)], client)

        assert client.fetched == list(links)
        assert [a.url for a in resolved[0].articles] == list(links)

    def test_every_entry_is_resolved(self) -> None:
        entries = [FeedEntry(f"e{n}", None, "d", links=(f"https://e{n}.com/",)) for n in range(6)]
        client = FakeClient(pages={f"https://e{n}.com/": GOOD_PAGE for n in range(6)})

        resolved = resolve(entries, client, max_concurrent=2)

        assert sorted(item.entry.title for item in resolved) == [f"e{n}" for n in range(6)]
        assert all(len(item.articles) == 1 for item in resolved)

    def test_entry_without_links(self) -> None:
        resolved = resolve([FeedEntry("t", None, "d")], FakeClient())
        assert resolved[0].articles == []

    def test_pages_without_content_are_dropped(self) -> None:
        client = FakeClient(pages={"https://a.com/1": "<p>no container</p>"})
        resolved = resolve([FeedEntry("t", None, "d", links=("https://a.com/1",))], client,
                           extractor_factory=FakeExtractor)
        assert resolved[0].articles == []

    def test_unexpected_errors_skip_the_link(self, caplog) -> None:
        class BrokenExtractor(FakeExtractor):
            def article_node(self, document, language="en"):
                raise RuntimeError("boom")

        client = FakeClient(pages={"https://a.com/1": GOOD_PAGE})
        entry = FeedEntry("t", None, "d", links=("https://a.com/1",))
        with caplog.at_level(logging.WARNING, logger="tds.core.resolver"):
            resolved = resolve([entry], client, extractor_factory=BrokenExtractor)

        assert resolved[0].articles == []
        assert "boom" in caplog.text

    def test_site_rule_is_used_end_to_end(self) -> None:
        page = """<html><body>
            <div class="Sidebar"><p>Sidebar text that is much longer than the post itself.</p></div>
            <div class="PostContent"><p>The story.</p><div class="NewsletterEmbed-container">Sign up</div></div>
        </body></html>"""
        link = "https://theintercept.com/2020/11/22/story/"
        client = FakeClient(pages={link: page})
        diagnostics = Diagnostics()

        resolved = resolve([FeedEntry("t", None, "d", links=(link,))], client,
                           diagnostics=diagnostics,
                           extractor_factory=lambda: FakeExtractor(node_selector="div.Sidebar",
                                                                   title="The Intercept story"))

        article = resolved[0].articles[0]
        assert article.title == "The Intercept story"
        assert "The story." in article.html
        assert "Sidebar" not in article.html
        assert "Sign up" not in article.html
        assert diagnostics.warnings == []


class TestFetchArticles:
    def test_non_http_links_are_skipped(self) -> None:
        client = FakeClient(pages={"https://a.com/1": GOOD_PAGE})
        articles = asyncio.run(fetch_articles(
            client, ["ftp://files.example.com/x", "https://a.com/1"],
            extractor_factory=lambda: FakeExtractor(node_selector="#main"),
        ))
        assert [a.url for a in articles] == ["https://a.com/1"]
        assert client.fetched == ["https://a.com/1"]


class TestCheckUrl:
    @pytest.mark.parametrize("link", ["ftp://x.com/a", "mailto:rms@gnu.org", "/relative", ""])
    def test_rejects_non_http(self, link) -> None:
        with pytest.raises(ParseFailed):
            check_url(link)

    def test_accepts_http(self) -> None:
        check_url("http://example.com/")
        check_url("https://example.com/a?b=c")
