# input_spider/crawler/urls.py
"""
URL canonicalization for discovered links and seeds.

Only root-relative (``/x``) and scheme-relative (``//host/x``) hrefs are
resolved against the page they were found on. Other relative forms
(``x``, ``./x``, ``../x``) are passed through untouched; they carry no
scheme or host, so the scope guard drops them.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

from input_spider.errors import ConfigurationError, LinkParseError
from input_spider.logger import logger

__all__ = (
    "normalize_link",
    "canonicalize_seed",
    "identity_key",
)

_IGNORED_HREFS = frozenset(("", "#"))


def _split(raw: str) -> SplitResult:
    """``urlsplit`` that also rejects malformed ports; raises ValueError."""
    parts = urlsplit(raw)
    if parts.netloc:
        parts.port  # noqa: B018 - raises ValueError on a bad port
    return parts


def normalize_link(href: str, base_url: str) -> Optional[str]:
    """
    Canonicalize *href* found on the page at *base_url*.

    Returns the canonical URL, or ``None`` for hrefs that are empty or ``#``.
    Raises :class:`LinkParseError` when the href cannot be parsed.
    """
    raw = href.strip()
    if raw in _IGNORED_HREFS:
        logger.debug("[%s] Skipping empty link: %r", base_url, href)
        return None

    try:
        parts = _split(raw)
    except ValueError as exc:
        raise LinkParseError(href, str(exc)) from exc

    if not parts.scheme and raw.startswith("//"):
        base = urlsplit(base_url)
        parts = parts._replace(scheme=base.scheme)
    elif not parts.scheme and raw.startswith("/"):
        base = urlsplit(base_url)
        parts = parts._replace(scheme=base.scheme, netloc=base.netloc)

    canonical = urlunsplit(parts._replace(fragment=""))
    if not canonical:
        logger.debug("[%s] Skipping fragment-only link: %r", base_url, href)
        return None
    return canonical


def canonicalize_seed(raw: str) -> str:
    """Validate a seed URL and return it without its fragment."""
    value = raw.strip()
    try:
        parts = _split(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid URL provided: {raw!r} ({exc})") from exc
    if not parts.scheme or not parts.netloc:
        raise ConfigurationError(f"Invalid URL provided: {raw!r} (scheme and host are required)")
    return urlunsplit(parts._replace(fragment=""))


def identity_key(url: str) -> str:
    """Dedup key of a canonical URL: ``/x`` and ``/x/`` share one key."""
    return url[:-1] if url.endswith("/") else url
