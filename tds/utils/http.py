"""
HTTP utilities for TDS.
"""
import asyncio
import logging
from typing import Optional

import aiohttp
import async_timeout
import backoff

from tds.config import get_config
from tds.core.article import ImageResource
from tds.core.errors import FetchFailed

# Configure logging
logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 20  # seconds
MAX_TRIES = 3


def is_client_error(e: Exception) -> bool:
    """A 4xx status won't change on retry."""
    return isinstance(e, aiohttp.ClientResponseError) and 400 <= e.status < 500


class HttpClient:
    """
    Shared asynchronous HTTP client for page fetches and image size probes.

    One instance (one connection pool) is shared by every concurrent task.
    The client keeps no per-request state.
    """
    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None):
        self.timeout = timeout or get_config('http.timeout', REQUEST_TIMEOUT)
        self._session = None
        self.headers = {
            'User-Agent': user_agent or get_config('http.agent'),
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
        }

    @property
    def session(self) -> aiohttp.ClientSession:
        """
        Lazy initialization of aiohttp session.

        Returns:
            aiohttp.ClientSession: The HTTP session
        """
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=self.headers)
        return self._session

    async def close(self):
        """Close aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def get(self, url: str) -> bytes:
        """
        Fetch the body of ``url``, retrying transient failures.

        Args:
            url: The URL to fetch

        Returns:
            The raw response body

        Raises:
            FetchFailed: If the request failed, timed out or returned an error status
        """
        try:
            return await self._get(url)
        except asyncio.TimeoutError:
            raise FetchFailed(url, f"timed out after {self.timeout}s") from None
        except aiohttp.ClientError as e:
            raise FetchFailed(url, str(e) or type(e).__name__) from e

    @backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientError, asyncio.TimeoutError),
        max_tries=lambda: get_config('http.retries', MAX_TRIES),
        giveup=is_client_error
    )
    async def _get(self, url: str) -> bytes:
        async with async_timeout.timeout(self.timeout):
            async with self.session.get(url) as response:
                response.raise_for_status()
                return await response.read()

    async def probe_size(self, url: str) -> ImageResource:
        """
        Ask the server for the size and type of ``url`` without downloading it.

        Args:
            url: The resource URL

        Returns:
            ImageResource with the reported Content-Length and Content-Type

        Raises:
            FetchFailed: If the request failed or the size header is missing
        """
        try:
            async with async_timeout.timeout(self.timeout):
                async with self.session.head(url, allow_redirects=True) as response:
                    response.raise_for_status()
                    length = response.headers.get('Content-Length')
                    mime = response.headers.get('Content-Type', '')
        except asyncio.TimeoutError:
            raise FetchFailed(url, f"timed out after {self.timeout}s") from None
        except aiohttp.ClientError as e:
            raise FetchFailed(url, str(e) or type(e).__name__) from e

        try:
            size = int(length)
        except (TypeError, ValueError):
            raise FetchFailed(url, "no usable Content-Length header") from None

        logger.debug(f"Probed {url}: {size} bytes, {mime or 'unknown type'}")
        return ImageResource(url=url, size_bytes=size, mime=mime)
