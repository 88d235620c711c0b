# input_spider/crawler/frontier.py
"""
Pending queue plus visited set: the single place where URLs are deduplicated.
"""
from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Dict, Iterable, Optional

from input_spider.crawler.scope import ScopeGuard
from input_spider.crawler.urls import identity_key
from input_spider.logger import logger

__all__ = ("Frontier",)


class Frontier:
    """
    FIFO of canonical URLs awaiting fetch, guarded by a visited mapping.

    ``offer`` runs the visited check, the visited mark and the enqueue under
    one lock, so concurrent discoverers of the same URL enqueue it exactly
    once. The visited mapping never shrinks.
    """

    def __init__(self, scope: ScopeGuard) -> None:
        self.scope = scope
        self._pending: Deque[str] = deque()
        self._visited: Dict[str, str] = {}
        self._lock = threading.Lock()

    def offer(self, url: str) -> bool:
        """Enqueue *url* if it is in scope and unseen; return whether it was."""
        if not self.scope.in_scope(url):
            return False
        key = identity_key(url)
        with self._lock:
            if key in self._visited:
                return False
            self._visited[key] = url
            self._pending.append(url)
        logger.info("[%s] URL found", url)
        return True

    def offer_all(self, urls: Iterable[str]) -> int:
        return sum(1 for url in urls if self.offer(url))

    def take(self) -> Optional[str]:
        """Pop the next URL, or ``None`` when nothing is pending."""
        with self._lock:
            return self._pending.popleft() if self._pending else None

    def is_visited(self, url: str) -> bool:
        with self._lock:
            return identity_key(url) in self._visited

    @property
    def visited_count(self) -> int:
        with self._lock:
            return len(self._visited)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
