"""
Wrapper that runs one crawl and returns its input records.
"""
from typing import List, Optional

from input_spider.config import SpiderConfig
from input_spider.crawler.crawler import InputSpider
from input_spider.crawler.models import InputRecord
from input_spider.report.text_report import TextReport


async def start_scan(cfg: SpiderConfig, report: Optional[TextReport] = None) -> List[InputRecord]:
    """
    Run the crawler inside its context and return the emitted records.

    Parameters
    ----------
    cfg : SpiderConfig
        Crawl settings.
    report : TextReport, optional
        Result sink; a stdout :class:`TextReport` when omitted.

    Returns
    -------
    List[InputRecord]
        One record per page that contained at least one ``<input>``.
    """
    async with InputSpider(cfg, report=report) as spider:
        records = await spider.crawl()
    return records

__all__ = ["start_scan"]
