"""
Resolve lazy-loaded images.

Some sites put a tiny placeholder image in ``src`` and the real image in a
``data-*`` attribute or a ``srcset``, swapping them in with javascript. This
filter checks whether that appears to be the case and puts the real image
back into ``src``.
"""
import asyncio
import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from bs4 import Tag

from tds.config import get_config
from tds.core.article import ImageResource
from tds.core.errors import FetchFailed

logger = logging.getLogger(__name__)

PLACEHOLDER_BYTES = 2000

_DESCRIPTOR = re.compile(r"^(\d+(?:\.\d+)?)[wx],?$")


class ImgDataSrcFilter:
    """
    Replaces placeholder ``<img>`` sources with the real image.

    Size probes for different candidate URLs, and for different images,
    run concurrently on the shared client.
    """
    def __init__(self, base: str, client, placeholder_bytes: Optional[int] = None):
        self.base = base
        self.client = client
        self.placeholder_bytes = placeholder_bytes or get_config('images.placeholder', PLACEHOLDER_BYTES)

    async def run(self, node: Tag) -> None:
        images = [img for img in node.find_all("img") if has_data_attr(img)]
        await asyncio.gather(*(self.resolve(img) for img in images))

    async def resolve(self, img: Tag) -> None:
        if await self.is_likely_placeholder(img):
            await self.try_resolve_src(img)

    async def is_likely_placeholder(self, img: Tag) -> bool:
        """
        An image is a likely placeholder if its ``src`` is missing, inline,
        not an absolute URL, can't be probed, or is smaller than the
        placeholder threshold.
        """
        src = img.get("src")
        if not src or src.startswith("data:"):
            return True
        if not is_absolute_http(src):
            return True

        logger.debug(f"Loading to check if placeholder: {src}")
        resource = await self._probe(src)
        if resource is None:
            return True
        return resource.size_bytes < self.placeholder_bytes

    async def try_resolve_src(self, img: Tag) -> None:
        srcset = img.get("srcset") or img.get("data-srcset")
        if srcset:
            src = image_from_srcset(srcset)
        else:
            image = pick_image(await self.resolve_images(img))
            src = image.url if image else None

        if src:
            img["src"] = src

    async def resolve_images(self, img: Tag) -> List[ImageResource]:
        """
        Probe every URL found in a ``data-*`` attribute of ``img``.

        Returns:
            The candidates the server reported as images
        """
        urls = data_urls(img, self.base)
        resources = await asyncio.gather(*(self._probe(url) for url in urls))
        return [r for r in resources if r is not None and r.is_image]

    async def _probe(self, url: str) -> Optional[ImageResource]:
        try:
            return await self.client.probe_size(url)
        except FetchFailed as e:
            logger.debug(f"Image probe failed: {e}")
            return None


def has_data_attr(img: Tag) -> bool:
    return any(name.startswith("data-") for name in img.attrs)


def is_absolute_http(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def data_urls(img: Tag, base: str) -> List[str]:
    """
    Collect the ``data-*`` attribute values of ``img`` that resolve to
    http(s) URLs, in attribute order and without duplicates.
    """
    urls = []
    for name, value in img.attrs.items():
        if not name.startswith("data-") or not isinstance(value, str):
            continue
        value = value.strip()
        if not value or any(c.isspace() for c in value):
            continue
        try:
            url = urljoin(base, value)
        except ValueError:
            continue
        if is_absolute_http(url) and url not in urls:
            urls.append(url)
    return urls


def image_from_srcset(value: str) -> Optional[str]:
    """
    Pick the URL with the largest width or density descriptor from a srcset.

    A token is a descriptor only if it looks like ``480w`` or ``1.5x`` and
    follows a URL that has none yet; any other token starts a new candidate.
    Candidates without a descriptor rank lowest.
    """
    candidates = parse_srcset(value)
    if not candidates:
        return None
    best = max(candidates, key=lambda link: (link[1] is not None, link[1] or 0.0))
    return best[0]


def parse_srcset(value: str) -> List[Tuple[str, Optional[float]]]:
    candidates: List[Tuple[str, Optional[float]]] = []
    # A trailing comma on the URL closes the candidate
    open_candidate = False
    for token in value.split():
        size = parse_descriptor(token)
        if size is not None and open_candidate:
            candidates[-1] = (candidates[-1][0], size)
            open_candidate = False
            continue
        if token == ",":
            open_candidate = False
            continue
        url = token.rstrip(",")
        if url:
            candidates.append((url, None))
        open_candidate = bool(url) and not token.endswith(",")
    return candidates


def parse_descriptor(token: str) -> Optional[float]:
    """The number in a ``480w`` or ``2x`` descriptor, or None for anything else."""
    match = _DESCRIPTOR.match(token)
    return float(match.group(1)) if match else None


def pick_image(images: List[ImageResource]) -> Optional[ImageResource]:
    """Return the largest image, or None if there are none."""
    if not images:
        return None
    return max(images, key=lambda image: image.size_bytes)
