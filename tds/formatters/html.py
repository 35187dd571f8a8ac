"""
HTML page rendering for TDS.
"""
import html
import datetime
import logging
from typing import Iterable, Optional

from tds.config import get_config
from tds.core.article import Article, ResolvedItem

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_CSS = """
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
    max-width: 50em;
    margin: 0 auto;
    padding: 20px;
    line-height: 1.6;
    color: #333;
}

h1, h2, h3 {
    color: #1a1a1a;
    margin-top: 1.5em;
    margin-bottom: 0.5em;
}

h5 {
    color: #4a5568;
    overflow: hidden;
}

a {
    color: #0066cc;
    text-decoration: none;
}

a:hover {
    text-decoration: underline;
}

blockquote {
    border-left: 4px solid #0066cc;
    margin: 20px 0;
    padding: 10px 20px;
    background-color: #f8f9fa;
    color: #2d3748;
}

pre, code {
    background-color: #f8f9fa;
    border-radius: 4px;
    padding: 12px;
    overflow-x: auto;
    font-family: "SFMono-Regular", Consolas, "Liberation Mono", Menlo, monospace;
}

img {
    max-width: 100%;
    height: auto;
    border-radius: 4px;
    margin: 20px 0;
}

hr {
    border: none;
    border-top: 1px solid #e9ecef;
    margin: 30px 0;
}
"""

ITEM_SEPARATOR = "<br/><hr><br/><br/><br/>"
ARTICLE_SEPARATOR = "<p><hr></p>"


class HtmlConverter:
    """
    Renders resolved feed items into a single HTML page.
    """
    def __init__(self, css_file: Optional[str] = None):
        """
        Initialize the HtmlConverter.

        Args:
            css_file: Path to the CSS file to use for styling
        """
        self.css_file = css_file or get_config('output.css')
        self.css_content = self._load_css()

    def _load_css(self) -> str:
        """
        Load CSS content from file.

        Returns:
            CSS content as string
        """
        if not self.css_file:
            return DEFAULT_CSS
        try:
            with open(self.css_file, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            logger.warning(f"CSS file {self.css_file} not found. Using default styles.")
            return DEFAULT_CSS

    def render(self, items: Iterable[ResolvedItem]) -> str:
        """
        Render the complete page.

        Args:
            items: The resolved feed items

        Returns:
            The page as an HTML string
        """
        items_html = ITEM_SEPARATOR.join(self.item_to_html(item) for item in items)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="generator" content="The Daily Stallman">
    <meta name="date" content="{datetime.date.today().isoformat()}">
    <title>The Daily Stallman</title>
    <style>{self.css_content}</style>
</head>
<body>
{items_html}
</body>
</html>"""

    def item_to_html(self, item: ResolvedItem) -> str:
        articles_html = ARTICLE_SEPARATOR.join(self.article_to_html(a) for a in item.articles)
        return (
            f"<p><strong>RMS says:</strong></p>"
            f"<blockquote>{item.entry.description}</blockquote>"
            f"{articles_html}"
        )

    def article_to_html(self, article: Article) -> str:
        link = html.escape(article.url)
        title = html.escape(article.title or article.url)
        authors = html.escape(", ".join(article.authors))
        date = html.escape(article.publishing_date or "")

        # The date floats right only when both parts are present
        float_side = "right" if authors and date else "left"

        return f"""<div>
    <h1>{title}</h1>
    <a href="{link}">{link}</a>
    <h5>
        <span style="float: left;">{authors}</span>
        <span style="float: {float_side}; margin-right: 10%">{date}</span>
    </h5>
    <br/>
    {article.html}
</div>
"""
