# input_spider/report/text_report.py

"""
Plain-text output of the input elements found during a crawl.

One block per page that has at least one ``<input>``::

    [http://example.com/]
    	<input name="q" type="text"></input>

Blocks are written in the order pages finish, not the order they were found.
"""
from __future__ import annotations

import threading
from typing import List, Optional, TextIO

import click

from input_spider.crawler.models import InputRecord
from input_spider.parser.html_parser import render_input

__all__ = ("TextReport", "format_record")


def format_record(record: InputRecord) -> str:
    lines = [f"[{record.page_url}]"]
    lines.extend(f"\t{render_input(element)}" for element in record.elements)
    return "\n".join(lines) + "\n\n"


class TextReport:
    """Result sink: prints each record as it arrives and keeps it."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        # None means click's stdout, looked up on every write
        self.stream = stream
        self.records: List[InputRecord] = []
        self._lock = threading.Lock()

    def emit(self, record: InputRecord) -> None:
        block = format_record(record)
        with self._lock:
            self.records.append(record)
            click.echo(block, file=self.stream, nl=False)

    def __len__(self) -> int:
        return len(self.records)
