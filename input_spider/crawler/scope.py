# input_spider/crawler/scope.py
"""
Whitelist of seed ``(scheme, host)`` pairs.
"""
from __future__ import annotations

from typing import Iterable, Tuple
from urllib.parse import urlsplit

__all__ = ("SeedTarget", "ScopeGuard")

SeedTarget = Tuple[str, str]


def _target(url: str) -> SeedTarget:
    parts = urlsplit(url)
    # host keeps the port and drops any userinfo
    host = parts.netloc.rpartition("@")[2]
    return parts.scheme.lower(), host.lower()


class ScopeGuard:
    """
    Immutable set of seed targets.

    A URL is in scope iff its scheme and host equal one seed's, compared
    case-insensitively. Subdomains, other ports and ``:80`` versus no port are
    all different hosts.
    """

    __slots__ = ("_targets",)

    def __init__(self, seeds: Iterable[str]) -> None:
        self._targets: Tuple[SeedTarget, ...] = tuple(dict.fromkeys(_target(s) for s in seeds))

    @property
    def targets(self) -> Tuple[SeedTarget, ...]:
        return self._targets

    def in_scope(self, url: str) -> bool:
        try:
            target = _target(url)
        except ValueError:
            return False
        if not target[0] or not target[1]:
            return False
        return target in self._targets

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.in_scope(url)

    def __repr__(self) -> str:
        return f"ScopeGuard({[f'{s}://{h}' for s, h in self._targets]!r})"
