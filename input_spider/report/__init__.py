"""input_spider.report: output of the collected input records."""

from __future__ import annotations

from input_spider.report.text_report import TextReport, format_record

__all__ = ["TextReport", "format_record"]
