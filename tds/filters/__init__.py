"""
DOM filters applied to an extracted article node.
"""
import logging
from typing import Iterable, Optional

from bs4 import Tag

from tds.filters.images import ImgDataSrcFilter
from tds.filters.links import RelativeLinksFilter

logger = logging.getLogger(__name__)

# Elements that are never part of the article text.
BOILERPLATE_SELECTORS = [
    "style",
    "iframe",
    "script",
    "button",
    "form",
    "aside",
    "*.ad",
    '[class*="share"]',
    '[class*="sharing"]',
    '[class*="video"]',
    '[class*="social"]',
    '[class*="outbrain"]',
]

STRIPPED_ATTRIBUTES = ["style"]


async def do_global_filtering(node: Tag, url: str, client=None,
                              placeholder_bytes: Optional[int] = None) -> None:
    """
    Run every global filter over ``node`` in place.

    Boilerplate removal runs first, then lazy image resolution, then
    relative link resolution.

    Args:
        node: The article node
        url: URL of the page the node came from
        client: HTTP client used to probe images; without one lazy images
            are left alone
        placeholder_bytes: Size under which an image counts as a placeholder
    """
    removed = remove_all(node, BOILERPLATE_SELECTORS)
    remove_all_attr(node, STRIPPED_ATTRIBUTES)
    logger.debug(f"Removed {removed} boilerplate elements from {url}")

    if client is not None:
        await ImgDataSrcFilter(url, client, placeholder_bytes).run(node)
    RelativeLinksFilter(url).run(node)


def remove_all(node: Tag, selectors: Iterable[str]) -> int:
    """
    Detach every descendant of ``node`` matching any of ``selectors``.

    Args:
        node: The root to search under; never removed itself
        selectors: CSS selectors

    Returns:
        Number of elements removed
    """
    # select() returns a list, so nothing is detached while matching
    targets = node.select(", ".join(selectors))
    for target in targets:
        target.extract()
    return len(targets)


def remove_all_attr(node: Tag, attributes: Iterable[str]) -> None:
    """Remove ``attributes`` from ``node`` and all of its descendants."""
    attributes = list(attributes)
    for tag in _inclusive_descendants(node):
        for attr in attributes:
            tag.attrs.pop(attr, None)


def remove_all_class(node: Tag, classes: Iterable[str]) -> None:
    """Drop the given class names from ``node`` and all of its descendants."""
    classes = set(classes)
    for tag in _inclusive_descendants(node):
        current = tag.get("class")
        if not current:
            continue
        if isinstance(current, str):
            current = current.split()
        keep = [c for c in current if c not in classes]
        if keep:
            tag["class"] = keep
        else:
            del tag["class"]


def replace_all(node: Tag, selector: str, name: str) -> int:
    """
    Turn every element matching ``selector`` into a bare ``name`` element.

    The element keeps its children and position but loses its attributes.

    Returns:
        Number of elements replaced
    """
    targets = node.select(selector)
    for target in targets:
        target.name = name
        target.attrs = {}
    return len(targets)


def _inclusive_descendants(node: Tag):
    yield node
    yield from node.find_all(True)
