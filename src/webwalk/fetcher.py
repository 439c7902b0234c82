"""
HTTP fetching of HTML documents.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Optional

import requests
from bs4 import BeautifulSoup
from bs4.dammit import EncodingDetector

from webwalk import __version__
from webwalk.errors import (
    BadContentType,
    BadHttpStatus,
    HttpError,
    InvalidURL,
    MissingContentType,
    TextDecodeError,
)
from webwalk.urls import to_url

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = f"webwalk/{__version__}"

# Media types accepted as HTML pages
HTML_MEDIA_TYPES: frozenset[str] = frozenset(("text/html", "application/xhtml+xml"))


@dataclass(frozen=True)
class Document:
    """A fetched HTML page: the URL it was served from and its decoded text."""
    url: str
    html: str

    @cached_property
    def soup(self) -> BeautifulSoup:
        """Parsed tree, built on first access."""
        return BeautifulSoup(self.html, "lxml")


def media_type(content_type: str) -> str:
    """Return the bare media type of a Content-Type value ("text/html; charset=x" -> "text/html")."""
    return content_type.split(";", 1)[0].strip().lower()


def is_html(content_type: str) -> bool:
    return media_type(content_type) in HTML_MEDIA_TYPES


def header_charset(content_type: str) -> Optional[str]:
    """Return the charset parameter of a Content-Type value, if any."""
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            return value.strip().strip("\"'") or None
    return None


def decode_body(resp: requests.Response) -> str:
    """
    Strictly decode the response body.

    The encoding is the Content-Type charset, else the document's own
    <meta charset> declaration, else UTF-8.
    """
    try:
        body = resp.content
    except requests.RequestException as e:
        raise TextDecodeError(e) from e

    encoding = (
        header_charset(resp.headers.get("content-type", ""))
        or EncodingDetector.find_declared_encoding(body, is_html=True)
        or "utf-8"
    )
    try:
        return body.decode(encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise TextDecodeError(e, encoding) from e


def fetch_page(
    url: object,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Document:
    """
    GET a URL and return it as an HTML Document.

    Args:
        url: Anything `to_url` accepts.
        session: Session to issue the request with (default: a one-off request).
        timeout: HTTP request timeout in seconds.

    Raises:
        InvalidURL: url could not be converted.
        HttpError: transport-level failure.
        BadHttpStatus: non-2xx response.
        MissingContentType: no Content-Type header.
        BadContentType: Content-Type is not HTML.
        TextDecodeError: body could not be read or decoded.
    """
    target = to_url(url)
    if target is None:
        raise InvalidURL(url)

    getter = session.get if session is not None else requests.get
    try:
        resp = getter(target, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise HttpError(e) from e

    if not 200 <= resp.status_code < 300:
        raise BadHttpStatus(resp.status_code)

    content_type = resp.headers.get("content-type")
    if content_type is None:
        raise MissingContentType()
    if not is_html(content_type):
        raise BadContentType(content_type)

    html = decode_body(resp)
    final_url = to_url(resp.url) or target
    logger.debug("Fetched %s (%d, %s, %d chars)", final_url, resp.status_code, content_type, len(html))
    return Document(url=final_url, html=html)


class Fetcher:
    """
    Reusable fetcher holding one HTTP session.

    Usable as a context manager; `close()` releases pooled connections.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def fetch(self, url: object) -> Document:
        return fetch_page(url, session=self.session, timeout=self.timeout)

    __call__ = fetch

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
