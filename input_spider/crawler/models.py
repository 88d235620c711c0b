# input_spider/crawler/models.py
"""
Data models for the InputSpider crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

__all__ = ("PageData", "InputElement", "InputRecord", "CrawlStats")

#: Ordered attribute name → value mapping of one ``<input>`` element.
InputElement = Dict[str, str]


@dataclass(slots=True)
class PageData:
    """Raw result of one GET: the canonical URL it was issued for and the body."""

    url: str
    status: int
    content: bytes
    charset: Optional[str] = None
    location: Optional[str] = None


@dataclass(slots=True)
class InputRecord:
    """All ``<input>`` elements found on one page, in document order."""

    page_url: str
    elements: List[InputElement] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.elements)


@dataclass(slots=True)
class CrawlStats:
    """Counters collected during a crawl for the summary log line."""

    pages_fetched: int = 0
    fetch_errors: int = 0
    parse_errors: int = 0
    records: int = 0
