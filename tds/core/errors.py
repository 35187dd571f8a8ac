"""
Exceptions raised by TDS.
"""


class TdsError(Exception):
    """Base class for all TDS errors."""


class FetchFailed(TdsError):
    """A page or image could not be fetched (network error, timeout, bad status)."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ParseFailed(TdsError):
    """A URL or document could not be parsed."""


class ExtractionFailed(TdsError):
    """No article could be extracted from a page."""


class ContentNotFound(ExtractionFailed):
    """None of the content location strategies found an article node."""

    def __init__(self, url: str):
        super().__init__(f"failed to extract article html from {url}")
        self.url = url


class FeedUnavailable(TdsError):
    """The news feed could not be fetched or parsed."""
