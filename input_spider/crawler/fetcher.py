# input_spider/crawler/fetcher.py
"""
Fetcher module: issues the GET for one canonical URL and returns the raw body.

Status codes are not inspected: error pages are parsed like any other page.
Redirects are not followed by the client; the resolved ``Location`` is handed
back and the crawler decides whether to follow it or offer it to the frontier.
"""
from __future__ import annotations

import asyncio
from typing import Optional
from urllib.parse import urljoin

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from input_spider.config import SpiderConfig
from input_spider.crawler.models import PageData
from input_spider.errors import FetchError
from input_spider.logger import logger

__all__ = ("Fetcher", "build_session")


def build_session(config: SpiderConfig) -> ClientSession:
    """
    Create the HTTP session for one crawl.

    Certificate validation follows ``config.verify_tls``, which is ``False``
    unless turned on: the tool targets test environments with self-signed
    certificates. The choice is logged so it is never silent.
    """
    if config.verify_tls:
        connector = TCPConnector(ssl=True, limit=config.limit)
    else:
        logger.warning("TLS certificate verification is disabled")
        connector = TCPConnector(ssl=False, limit=config.limit)
    return ClientSession(
        connector=connector,
        timeout=ClientTimeout(total=config.timeout),
        headers={"User-Agent": config.user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Thin wrapper around a shared :class:`ClientSession`."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> PageData:
        """
        GET *url* and return its :class:`PageData`.

        Raises :class:`FetchError` on network failure, TLS failure or timeout.
        """
        try:
            async with self.session.get(url, allow_redirects=False) as resp:
                content = await resp.read()
                location: Optional[str] = resp.headers.get("Location")
                return PageData(
                    url=url,
                    status=resp.status,
                    content=content,
                    charset=resp.charset,
                    location=urljoin(url, location) if location else None,
                )
        except (ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(url, exc) from exc
