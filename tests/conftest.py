from __future__ import annotations

from typing import Dict, List, Optional, Union

import pytest

from webwalk.errors import BadHttpStatus, FetchError
from webwalk.fetcher import Document


def build_page(title: Optional[str] = None, links: List[str] = ()) -> str:
    """Build a small HTML page; title=None leaves out the <title> element."""
    head = f"<title>{title}</title>" if title is not None else ""
    anchors = "".join(f'<a href="{href}">{href}</a>' for href in links)
    return f"<html><head>{head}</head><body>{anchors}</body></html>"


class FakeWeb:
    """In-memory page graph standing in for the network; records every fetch."""

    def __init__(self, pages: Dict[str, Union[str, FetchError]]) -> None:
        self.pages = pages
        self.fetched: List[str] = []

    def fetch(self, url: str) -> Document:
        self.fetched.append(url)
        body = self.pages.get(url, BadHttpStatus(404))
        if isinstance(body, FetchError):
            raise body
        return Document(url=url, html=body)


@pytest.fixture
def page():
    """HTML page builder: page(title, links)."""
    return build_page


@pytest.fixture
def fake_web():
    """Factory for in-memory page graphs: fake_web({url: html or FetchError})."""
    return FakeWeb
