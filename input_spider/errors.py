# input_spider/errors.py
"""
Exception hierarchy for InputSpider.

Only :class:`ConfigurationError` is fatal; every other error is recovered at
the link or URL level and surfaced through logging.
"""
from __future__ import annotations

__all__ = (
    "SpiderError",
    "ConfigurationError",
    "LinkParseError",
    "FetchError",
    "DocumentParseError",
)


class SpiderError(Exception):
    """Base class for all InputSpider errors."""


class ConfigurationError(SpiderError):
    """Missing or invalid seeds, unreadable seed/config file, bad options."""


class LinkParseError(SpiderError):
    """An href found on a page could not be parsed."""

    def __init__(self, href: str, reason: str = "") -> None:
        self.href = href
        self.reason = reason
        super().__init__(f"Error parsing URL: {href}" + (f" ({reason})" if reason else ""))


class FetchError(SpiderError):
    """The GET for a URL failed (network, TLS, timeout)."""

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"{type(cause).__name__}: {cause}" if str(cause) else type(cause).__name__)


class DocumentParseError(SpiderError):
    """A fetched body could not be turned into an element tree."""

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(str(cause) or type(cause).__name__)
