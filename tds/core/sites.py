"""
Per-publisher extraction rules.

Each supported site has one ``SiteRule`` subclass. Rules are looked up by
site key (see ``tds.core.extractor.site_domain``) and either return a
``ContentCandidate`` or decline with None, in which case the generic
extraction runs instead.
"""
import re
from typing import TYPE_CHECKING, Dict, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from tds.core.article import ContentCandidate
from tds.filters import remove_all, remove_all_class, replace_all

if TYPE_CHECKING:
    from tds.core.extractor import ArticleExtractor


class SiteRule:
    """
    Base class for site rules.

    ``remove`` lists selectors of site specific cruft that is detached from
    the article node before it is returned.
    """
    domain: str = ""
    remove: Sequence[str] = ()

    @property
    def name(self) -> str:
        return type(self).__name__

    def extract(self, ctx: "ArticleExtractor") -> Optional[ContentCandidate]:
        article = self.article_node(ctx)
        if article is None:
            return None
        if self.remove:
            remove_all(article, self.remove)
        self.post_process(article)
        return ContentCandidate.with_article(article)

    def article_node(self, ctx: "ArticleExtractor") -> Optional[Tag]:
        return ctx.default_article_node()

    def post_process(self, article: Tag) -> None:
        pass


class SelectorRule(SiteRule):
    """A rule whose article node is the first element matching ``selector``."""
    selector: str = ""

    def article_node(self, ctx: "ArticleExtractor") -> Optional[Tag]:
        return ctx.warn(ctx.document.select_one(self.selector), "could not extract article node")


class CommonDreams(SiteRule):
    domain = "commondreams.org"
    remove = ["div.block-inject", "div.newswire-end"]


class TheGuardian(SiteRule):
    domain = "theguardian.com"
    remove = [
        "div.submeta",
        "div.block-share",
        "div[id^='rich-link-']",
        "div[data-component='rich-link']",
        "div[id^='guide-']",
        "div[class^='youtube-']",
        "*[class*='creditStyling']",
        "*[class*='footerStyling']",
        "*[class*='plusStyling']",
    ]

    def post_process(self, article: Tag) -> None:
        # Figures carry this class; the global share filter would drop them.
        remove_all_class(article, ["fig--has-shares"])


class TheIntercept(SelectorRule):
    domain = "theintercept.com"
    selector = "div.PostContent"
    remove = ["div.NewsletterEmbed-container", "div.PromoteRelatedPost-promo"]


class Gnu(SelectorRule):
    domain = "gnu.org"
    selector = "div#content"

    def extract(self, ctx: "ArticleExtractor") -> Optional[ContentCandidate]:
        parts = super().extract(ctx)
        if parts is None:
            return None
        heading = parts.article_node.find("h2")
        parts.title = ctx.warn(
            heading.get_text().strip() if heading is not None else None,
            "could not extract title",
        )
        return parts


class Cnn(SiteRule):
    domain = "cnn.com"
    remove = ["div.el__article--embed", "section#story-bottom"]

    def post_process(self, article: Tag) -> None:
        replace_all(article, "div.zn-body__paragraph", "p")


class TheAtlantic(SelectorRule):
    domain = "theatlantic.com"
    selector = "div.l-article__container"


class Vice(SiteRule):
    domain = "vice.com"

    RESIZE = re.compile(r"resize=\d+")

    def post_process(self, article: Tag) -> None:
        # Picture sources are served scaled down to thumbnail size
        for source in article.select("picture source[srcset]"):
            source["srcset"] = self.RESIZE.sub("resize=1000", source["srcset"])


class DailyKos(SelectorRule):
    domain = "dailykos.com"
    selector = 'div[class="story-column"] > noscript'

    def article_node(self, ctx: "ArticleExtractor") -> Optional[Tag]:
        noscript = super().article_node(ctx)
        if noscript is None:
            return None
        # The story is only rendered inside <noscript>
        markup = noscript.decode_contents() if noscript.find(True) else noscript.get_text()
        return BeautifulSoup(f"<div>{markup}</div>", "html.parser").div


class France24(SiteRule):
    domain = "france24.com"
    remove = ['[class*="o-self-promo"]']


SITE_RULES: Dict[str, SiteRule] = {
    rule.domain: rule
    for rule in (
        CommonDreams(),
        TheGuardian(),
        TheIntercept(),
        Gnu(),
        Cnn(),
        TheAtlantic(),
        Vice(),
        DailyKos(),
        France24(),
    )
}
