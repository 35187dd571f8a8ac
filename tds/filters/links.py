"""
Make relative links and image sources absolute.
"""
import logging
from urllib.parse import urljoin

from bs4 import Tag

logger = logging.getLogger(__name__)

# Element name -> attribute holding its URL
LINK_ATTRIBUTES = {
    "a": "href",
    "area": "href",
    "img": "src",
}


def is_http(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


class RelativeLinksFilter:
    """
    Rewrites relative ``href``/``src`` attributes against the page URL.
    """
    def __init__(self, base: str):
        self.base = base

    def run(self, node: Tag) -> None:
        for elem in node.find_all(list(LINK_ATTRIBUTES)):
            self.resolve_elem(elem, LINK_ATTRIBUTES[elem.name])

    def resolve_elem(self, elem: Tag, attribute: str) -> None:
        value = elem.get(attribute)
        if not value or is_http(value):
            return
        try:
            elem[attribute] = urljoin(self.base, value)
        except ValueError as e:
            logger.debug(f"Leaving {attribute}={value!r} as is: {e}")
