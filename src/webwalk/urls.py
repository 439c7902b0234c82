"""
URL conversion and normalization.

Every URL that enters the crawl goes through `to_url`, so the visited set and
the frontier always compare the same normalized form.
"""
from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlparse, urlunparse, urldefrag

WEB_SCHEMES: frozenset[str] = frozenset(("http", "https"))

DEFAULT_PORTS = {"http": 80, "https": 443}

# Whitespace or control characters anywhere inside a value make it malformed
_INVALID_CHARS = re.compile(r"[\x00-\x20\x7f]")


def to_url(value: object, base: Optional[str] = None) -> Optional[str]:
    """
    Convert a value to a normalized absolute URL, or None if it can't be.

    - Strips surrounding whitespace, rejects embedded whitespace
    - Resolves relative references against base (if given)
    - Drops fragments (#...)
    - Normalizes scheme/host case
    - Removes default ports (:80, :443)
    - Keeps querystrings (they matter for uniqueness)
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or _INVALID_CHARS.search(value):
        return None

    try:
        if base is not None:
            value = urljoin(base, value)
        joined, _ = urldefrag(value)
        parsed = urlparse(joined)
        port = parsed.port
    except ValueError:
        # Malformed netloc (bad IPv6 literal, non-numeric or out-of-range port)
        return None

    scheme = parsed.scheme.lower()
    if scheme not in WEB_SCHEMES:
        return None

    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return None

    if port is None or port == DEFAULT_PORTS[scheme]:
        netloc = hostname
    else:
        netloc = f"{hostname}:{port}"
    if ":" in hostname:
        # IPv6 literal
        netloc = f"[{hostname}]" + netloc[len(hostname):]
    if parsed.username or parsed.password:
        userinfo = parsed.username or ""
        if parsed.password:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunparse((
        scheme,
        netloc,
        parsed.path or "/",
        parsed.params,
        parsed.query,
        "",  # No fragment
    ))
