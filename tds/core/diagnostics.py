"""
Non-fatal extraction warnings.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ExtractorWarning:
    url: str
    message: str

    def __str__(self) -> str:
        return f"({self.url}) {self.message} - falling back on default extractor"


class Diagnostics:
    """
    Collects the warnings raised while extracting articles.

    Every warning is recorded. They are only written to the log when
    ``verbose`` is set.
    """
    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.warnings: List[ExtractorWarning] = []

    def warn(self, url: str, message: str) -> ExtractorWarning:
        warning = ExtractorWarning(url, message)
        self.warnings.append(warning)
        if self.verbose:
            logger.warning(str(warning))
        return warning

    def check(self, value: Optional[T], url: str, message: str) -> Optional[T]:
        """
        Pass ``value`` through, recording a warning if it is None.
        """
        if value is None:
            self.warn(url, message)
        return value

    def messages(self) -> List[str]:
        return [w.message for w in self.warnings]
