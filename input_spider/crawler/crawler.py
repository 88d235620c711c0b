# === FILE: input_spider/crawler/crawler.py ===
from __future__ import annotations

import time
from typing import List, Optional

from aiohttp import ClientSession

from input_spider.config import SpiderConfig
from input_spider.crawler.dispatcher import Dispatcher
from input_spider.crawler.fetcher import Fetcher, build_session
from input_spider.crawler.frontier import Frontier
from input_spider.crawler.models import CrawlStats, InputRecord, PageData
from input_spider.crawler.scope import ScopeGuard
from input_spider.crawler.urls import identity_key, normalize_link
from input_spider.errors import DocumentParseError, FetchError, LinkParseError
from input_spider.logger import logger
from input_spider.parser.html_parser import extract_inputs, extract_links, parse_document
from input_spider.report.text_report import TextReport

__all__ = ("InputSpider", "MAX_REDIRECTS")

#: same-page redirect hops followed inside one worker
MAX_REDIRECTS = 10


class InputSpider:
    """
    One crawl: scope, frontier, HTTP session, dispatcher and result sink.

    Nothing is shared between instances, so several crawls may run side by
    side in one event loop.
    """

    def __init__(self, config: SpiderConfig, report: Optional[TextReport] = None) -> None:
        self.config = config
        self.scope = ScopeGuard(config.seeds)
        self.frontier = Frontier(self.scope)
        self.dispatcher = Dispatcher(self.frontier, config.limit)
        self.report = report if report is not None else TextReport()
        self.stats = CrawlStats()
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None

    async def __aenter__(self) -> InputSpider:
        self.session = build_session(self.config)
        self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> List[InputRecord]:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        logger.info("Crawl started: %s (limit %d)", ", ".join(self.config.seeds), self.config.limit)
        start = time.monotonic()
        self.frontier.offer_all(self.config.seeds)
        await self.dispatcher.run(self._process)
        duration = time.monotonic() - start
        logger.info(
            "Finished: %d pages, %d fetch errors, %d parse errors, %d pages with inputs in %.2f s",
            self.stats.pages_fetched,
            self.stats.fetch_errors,
            self.stats.parse_errors,
            self.stats.records,
            duration,
        )
        return self.report.records

    async def _process(self, url: str) -> None:
        """Fetch one URL, feed its links back to the frontier and report its inputs."""
        logger.debug("[%s] Fetching", url)
        try:
            page = await self._fetch(url)
        except FetchError as exc:
            self.stats.fetch_errors += 1
            logger.warning("[%s] %s", url, exc)
            return
        self.stats.pages_fetched += 1

        try:
            tree = parse_document(page)
        except DocumentParseError as exc:
            self.stats.parse_errors += 1
            logger.warning("[%s] %s", page.url, exc)
            return

        extract_links(tree, page.url, self.frontier.offer)
        record = extract_inputs(tree, page.url)
        if record is not None:
            self.stats.records += 1
            self.report.emit(record)

    async def _fetch(self, url: str) -> PageData:
        """
        GET *url*, following redirects that stay on the same identity key
        (``/admin`` → ``/admin/``) for at most ``MAX_REDIRECTS`` hops.

        A redirect to any other URL is offered to the frontier instead, so
        it is scope-checked and fetched at most once like a discovered link.
        """
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        chain = {url}
        page = await self.fetcher.fetch(url)
        for _ in range(MAX_REDIRECTS):
            if not page.location:
                break
            target = self._redirect_target(page)
            if target is None or target in chain:
                break
            if identity_key(target) != identity_key(page.url):
                logger.debug("[%s] Redirects to %s", page.url, target)
                self.frontier.offer(target)
                break
            logger.debug("[%s] Following redirect to %s", page.url, target)
            chain.add(target)
            page = await self.fetcher.fetch(target)
        return page

    @staticmethod
    def _redirect_target(page: PageData) -> Optional[str]:
        try:
            return normalize_link(page.location or "", page.url)
        except LinkParseError as exc:
            logger.warning("[%s] Redirect: %s", page.url, exc)
            return None
