# input_spider/crawler/dispatcher.py
"""
Bounded worker pool and the dispatch loop that drains the frontier.

Termination uses one outstanding-work counter. A URL counts as outstanding
from the moment it is taken off the frontier until its handler has returned,
which is after every link it discovered was offered back. The loop stops
when the frontier is empty and the counter is zero; both are read on the
event loop with no suspension in between.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, Set

from input_spider.crawler.frontier import Frontier
from input_spider.logger import logger

__all__ = ("WorkerPool", "Dispatcher")

Job = Callable[[], Awaitable[None]]


class WorkerPool:
    """At most ``limit`` jobs in flight; :meth:`join` waits for all of them."""

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.limit = limit
        self._slots = asyncio.Semaphore(limit)
        self._outstanding = 0
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()
        self._finished = asyncio.Event()
        self._tasks: Set[asyncio.Task[None]] = set()

    @property
    def outstanding(self) -> int:
        """Jobs submitted and not finished, including those waiting for a slot."""
        return self._outstanding

    @property
    def in_flight(self) -> int:
        """Jobs currently holding a slot."""
        return self._in_flight

    async def submit(self, job: Job) -> asyncio.Task[None]:
        """
        Count *job* as outstanding, wait for a free slot and start it.

        The counter is bumped before the first suspension point, so a caller
        that dequeued work right before calling ``submit`` never exposes a
        window where that work is invisible.
        """
        self._outstanding += 1
        self._idle.clear()
        try:
            await self._slots.acquire()
        except BaseException:
            self._release_outstanding()
            raise
        self._in_flight += 1
        task = asyncio.create_task(self._run(job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, job: Job) -> None:
        try:
            await job()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Worker failed")
        finally:
            self._in_flight -= 1
            self._slots.release()
            self._release_outstanding()

    def _release_outstanding(self) -> None:
        self._outstanding -= 1
        if self._outstanding == 0:
            self._idle.set()
        self._finished.set()

    async def wait_for_completion(self) -> None:
        """Block until some job finishes after this call."""
        self._finished.clear()
        await self._finished.wait()

    async def join(self) -> None:
        await self._idle.wait()


class Dispatcher:
    """Feeds frontier URLs into a :class:`WorkerPool` until no work remains."""

    def __init__(self, frontier: Frontier, limit: int, pool: Optional[WorkerPool] = None) -> None:
        self.frontier = frontier
        self.pool = pool or WorkerPool(limit)

    async def run(self, handler: Callable[[str], Awaitable[None]]) -> int:
        """Process every URL the frontier yields; return how many were dispatched."""
        dispatched = 0
        while True:
            url = self.frontier.take()
            if url is not None:
                dispatched += 1
                await self.pool.submit(lambda url=url: handler(url))
                continue
            if self.pool.outstanding == 0:
                break
            await self.pool.wait_for_completion()
        await self.pool.join()
        logger.debug("Dispatcher drained after %d URLs", dispatched)
        return dispatched
