# File: tests/test_html_parser.py
from __future__ import annotations

import logging

import pytest

from input_spider.crawler.models import InputRecord, PageData
from input_spider.parser.html_parser import (
    extract_inputs,
    extract_links,
    iter_elements,
    parse_document,
    render_input,
)

PAGE_URL = "http://example.com/dir/page"

HTML = """
<html><body>
  <a href="/about">About</a>
  <form action="/search">
    <input name="q" type="text">
    <div><input type="hidden" name="csrf" value="abc" class="one two"></div>
    <input type="submit" disabled>
  </form>
  <a href="#">top</a>
  <a>no href</a>
  <a href="//cdn.example.com/lib.js#v1">cdn</a>
  <a href="http://[::1">broken</a>
  <a href="relative.html">rel</a>
  <a href="/contact#form">contact</a>
</body></html>
"""


def page(html: str, url: str = PAGE_URL, charset: str | None = "utf-8") -> PageData:
    return PageData(url=url, status=200, content=html.encode("utf-8"), charset=charset)


@pytest.fixture()
def tree():
    return parse_document(page(HTML))


def test_iter_elements_is_document_order_and_restartable(tree):
    names = [el.get("name") for el in iter_elements(tree, "input")]
    assert names == ["q", "csrf", None]
    assert len(list(iter_elements(tree, "input"))) == 3
    assert len(list(iter_elements(tree, "a"))) == 7


def test_extract_inputs_preserves_attribute_order(tree):
    record = extract_inputs(tree, PAGE_URL)
    assert isinstance(record, InputRecord)
    assert record.page_url == PAGE_URL
    assert [list(el) for el in record.elements] == [
        ["name", "type"],
        ["type", "name", "value", "class"],
        ["type", "disabled"],
    ]
    assert [render_input(el) for el in record.elements] == [
        '<input name="q" type="text"></input>',
        '<input type="hidden" name="csrf" value="abc" class="one two"></input>',
        '<input type="submit" disabled=""></input>',
    ]


def test_extract_inputs_none_without_inputs():
    tree = parse_document(page("<html><body><p>nothing here</p></body></html>"))
    assert extract_inputs(tree, PAGE_URL) is None


def test_render_input_strips_newlines():
    tree = parse_document(page('<input name="msg" value="line one\nline two\r\n">'))
    record = extract_inputs(tree, PAGE_URL)
    assert render_input(record.elements[0]) == '<input name="msg" value="line oneline two"></input>'


def test_non_ascii_body_uses_declared_charset():
    html = '<input name="q" placeholder="Recherche…">'
    tree = parse_document(PageData(PAGE_URL, 200, html.encode("latin-1", "replace"), charset="latin-1"))
    record = extract_inputs(tree, PAGE_URL)
    assert record.elements[0]["placeholder"] == "Recherche?"


def test_extract_links_offers_normalized_urls(tree, caplog):
    offered: list[str] = []

    def offer(url: str) -> bool:
        offered.append(url)
        return url.startswith("http://example.com/")

    with caplog.at_level(logging.WARNING, logger="InputSpider"):
        accepted = extract_links(tree, PAGE_URL, offer)

    assert offered == [
        "http://example.com/about",
        "http://cdn.example.com/lib.js",
        "relative.html",
        "http://example.com/contact",
    ]
    assert accepted == 2
    assert "Error parsing URL: http://[::1" in caplog.text


def test_extraction_does_not_mutate_tree(tree):
    before = str(tree)
    extract_links(tree, PAGE_URL, lambda url: True)
    extract_inputs(tree, PAGE_URL)
    assert str(tree) == before
