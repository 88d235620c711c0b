# === FILE: input_spider/parser/html_parser.py ===
"""HTML processing for InputSpider.

A fetched page is parsed once into a BeautifulSoup tree; two independent
passes then read it:

* :func:`extract_links` — every ``<a href>`` is canonicalized and offered to
  the frontier (the scope check happens inside ``offer``).
* :func:`extract_inputs` — every ``<input>`` is rebuilt as markup with its
  attributes in source order, giving the page's :class:`InputRecord`.

Both walk the tree through :func:`iter_elements`, a lazy depth-first
sequence that can be restarted as many times as needed. Neither pass mutates
the tree.
"""
from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Optional

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

from input_spider.crawler.models import InputElement, InputRecord, PageData
from input_spider.crawler.urls import normalize_link
from input_spider.errors import DocumentParseError, LinkParseError
from input_spider.logger import logger

__all__: Sequence[str] = (
    "parse_document",
    "iter_elements",
    "extract_links",
    "extract_inputs",
    "render_input",
)


def parse_document(page: PageData) -> BeautifulSoup:
    """Parse the raw body of *page*; raise :class:`DocumentParseError` on rejection."""
    try:
        return BeautifulSoup(
            page.content,
            "html.parser",
            from_encoding=page.charset,
            # keep class="a b" as one string so attributes render verbatim
            multi_valued_attributes=None,
        )
    except ParserRejectedMarkup as exc:
        raise DocumentParseError(page.url, exc) from exc


def iter_elements(tree: Tag, name: str) -> Iterator[Tag]:
    """Yield the elements called *name* below *tree*, in document order."""
    for node in tree.descendants:
        if isinstance(node, Tag) and node.name == name:
            yield node


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


def extract_links(tree: Tag, base_url: str, offer: Callable[[str], bool]) -> int:
    """Offer every anchor target on the page; return how many were accepted."""
    logger.debug("[%s] Processing HTML for links", base_url)
    accepted = 0
    for anchor in iter_elements(tree, "a"):
        href = anchor.get("href")
        if not isinstance(href, str):
            continue
        try:
            url = normalize_link(href, base_url)
        except LinkParseError as exc:
            logger.warning("[%s] %s", base_url, exc)
            continue
        if url is not None and offer(url):
            accepted += 1
    return accepted


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


def render_input(attrs: Mapping[str, str]) -> str:
    """Rebuild an input element: ``<input name="q" type="text"></input>``."""
    rendered = "".join(f' {key}="{value}"' for key, value in attrs.items())
    return f"<input{rendered}></input>".replace("\r", "").replace("\n", "")


def extract_inputs(tree: Tag, page_url: str) -> Optional[InputRecord]:
    """Collect the page's ``<input>`` elements; ``None`` if there are none."""
    logger.debug("[%s] Processing HTML for inputs", page_url)
    elements: list[InputElement] = []
    for node in iter_elements(tree, "input"):
        elements.append({key: _attr_text(value) for key, value in node.attrs.items()})
    if not elements:
        return None
    return InputRecord(page_url=page_url, elements=elements)


def _attr_text(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return "" if value is None else str(value)
