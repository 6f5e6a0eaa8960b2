"""
URL canonicalisation for deduplication and same-host checks.

Every URL that reaches the frontier goes through the same rules, and the
seed is their fixed point, so comparing strings is enough to detect duplicates.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

__all__ = ("InvalidSeedError", "normalize_url", "prepare_seed", "host_of")

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_REJECTED_PREFIXES = ("#", "javascript:", "mailto:")
_ALLOWED_SCHEMES = ("http", "https")


class InvalidSeedError(ValueError):
    """The crawl cannot start from the given domain or URL."""


def host_of(url: str) -> str:
    return urlsplit(url).netloc.lower()


def _rebuild(parts: SplitResult, path: str) -> str:
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path or "/", "", ""))


def _seed_form(url: str) -> str:
    """Lowercase scheme/host, drop query and fragment; a trailing slash is kept."""
    parts = urlsplit(url)
    path = parts.path
    if path.endswith("/"):
        path = path.rstrip("/") + "/"
    return _rebuild(parts, path)


def _canonical(url: str, seed_url: str) -> str:
    """Canonical form of a discovered URL.

    The trailing slash is trimmed, except on the root path and when the
    slashed form is the seed itself (``/docs`` and ``/docs/`` both map to a
    ``/docs/`` seed).
    """
    parts = urlsplit(url)
    path = parts.path.rstrip("/") or "/"
    if path != "/" and _rebuild(parts, path + "/") == _seed_form(seed_url):
        path += "/"
    return _rebuild(parts, path)



def normalize_url(raw: str, page_url: str, seed_url: str) -> Optional[str]:
    """Resolve *raw* (an ``href`` found on *page_url*) to a canonical same-host URL.

    Returns ``None`` for links that must not be followed: empty values,
    fragment-only references, ``javascript:``/``mailto:`` links, non-HTTP
    schemes and anything pointing away from the seed's host.
    """
    href = raw.strip()
    if not href or href.lower().startswith(_REJECTED_PREFIXES):
        return None

    seed = urlsplit(seed_url)
    if _SCHEME_RE.match(href):
        absolute = href
    elif href.startswith("//"):
        absolute = f"{seed.scheme}:{href}"
    elif href.startswith("/"):
        absolute = f"{seed.scheme}://{seed.netloc}{href}"
    else:
        # relative to the directory of the referring page
        absolute = urljoin(page_url, href)

    parts = urlsplit(absolute)
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        return None
    if parts.netloc.lower() != seed.netloc.lower():
        return None
    return _canonical(absolute, seed_url)


def prepare_seed(domain: Optional[str]) -> str:
    """Turn a bare host or absolute URL into the canonical seed URL.

    The path is kept as given, trailing slash included, since ``/docs/`` and
    ``/docs`` may be different resources. :func:`normalize_url` maps both
    spellings back to the seed.

    ``https://`` is prepended when no scheme is given. Raises
    :class:`InvalidSeedError` when no crawlable URL can be built.
    """
    candidate = (domain or "").strip()
    if not candidate:
        raise InvalidSeedError("Domain parameter is required")
    if not _SCHEME_RE.match(candidate) or "://" not in candidate:
        candidate = f"https://{candidate}"
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
        _ = parts.port  # raises on a malformed port
    except ValueError as exc:
        raise InvalidSeedError(f"Invalid URL {domain!r}: {exc}") from exc
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise InvalidSeedError(f"Unsupported scheme {parts.scheme!r} in {domain!r}")
    if not hostname:
        raise InvalidSeedError(f"No host in {domain!r}")
    if "@" in parts.netloc:
        raise InvalidSeedError(f"Credentials are not supported in {domain!r}")
    return _seed_form(candidate)
