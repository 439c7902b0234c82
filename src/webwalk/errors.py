"""
Error taxonomy for fetching and extracting pages.
"""
from __future__ import annotations

from typing import Optional


class WebwalkError(Exception):
    """Base class for all webwalk errors."""


class FetchError(WebwalkError):
    """A page could not be fetched as an HTML document."""


class InvalidURL(FetchError):
    def __init__(self, value: object) -> None:
        super().__init__(f"invalid URL: {value!r}")
        self.value = value


class HttpError(FetchError):
    """Transport-level failure (DNS, connection, TLS, timeout)."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause))
        self.cause = cause


class BadHttpStatus(FetchError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"bad HTTP status: {status_code}")
        self.status_code = status_code


class MissingContentType(FetchError):
    def __init__(self) -> None:
        super().__init__("missing HTTP content type")


class BadContentType(FetchError):
    def __init__(self, content_type: str) -> None:
        super().__init__(f"bad HTTP content type: {content_type!r}")
        self.content_type = content_type


class TextDecodeError(FetchError):
    def __init__(self, cause: BaseException, encoding: Optional[str] = None) -> None:
        super().__init__(f"text decoding error ({encoding or 'unknown encoding'}): {cause}")
        self.cause = cause
        self.encoding = encoding


class ExtractError(WebwalkError):
    """A fetched document did not yield page info."""


class NoTitle(ExtractError):
    def __init__(self) -> None:
        super().__init__("document has no title")
