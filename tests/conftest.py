# File: tests/conftest.py
from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Union

import pytest
import pytest_asyncio
from aiohttp import web

from input_spider.config import SpiderConfig

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]
PageBody = Union[str, Handler]


@dataclass
class Site:
    """A running local test site: its base URL and per-path hit counts."""

    base: str
    hits: Counter = field(default_factory=Counter)
    active: int = 0
    max_active: int = 0

    def url(self, path: str = "/") -> str:
        return f"{self.base}{path}"


@pytest.fixture(autouse=True)
def reset_logger():
    """Undo handlers installed by ``configure`` so caplog sees every record."""
    lg = logging.getLogger("InputSpider")
    yield
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
    lg.propagate = True
    lg.setLevel(logging.NOTSET)


@pytest_asyncio.fixture
async def serve_site(unused_tcp_port_factory):
    """
    Factory serving ``{path: html or handler}`` on 127.0.0.1.
    Unknown paths answer aiohttp's default 404.
    """
    runners: List[web.AppRunner] = []

    async def _serve(pages: Dict[str, PageBody], delay: float = 0.0) -> Site:
        port = unused_tcp_port_factory()
        site = Site(base=f"http://127.0.0.1:{port}")

        @web.middleware
        async def track(request: web.Request, handler):
            site.hits[request.path] += 1
            site.active += 1
            site.max_active = max(site.max_active, site.active)
            try:
                if delay:
                    await asyncio.sleep(delay)
                return await handler(request)
            finally:
                site.active -= 1

        def html_handler(body: str) -> Handler:
            async def handle(_):
                return web.Response(text=body, content_type="text/html")
            return handle

        app = web.Application(middlewares=[track])
        for path, page in pages.items():
            app.router.add_get(path, page if callable(page) else html_handler(page))

        runner = web.AppRunner(app)
        await runner.setup()
        await web.TCPSite(runner, "127.0.0.1", port).start()
        runners.append(runner)
        return site

    yield _serve
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def make_config() -> Callable[..., SpiderConfig]:
    def _make(*seeds: str, **kwargs) -> SpiderConfig:
        kwargs.setdefault("timeout", 5.0)
        return SpiderConfig(seeds=list(seeds), **kwargs)
    return _make

