"""
Title and link extraction from fetched documents.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from webwalk.errors import NoTitle
from webwalk.fetcher import Document
from webwalk.urls import to_url


@dataclass(frozen=True, slots=True)
class PageInfo:
    """Title and outbound links of a single crawled page."""
    title: str
    links: Tuple[str, ...] = ()


def extract_links(document: Document) -> List[str]:
    """Resolve every <a href> in document order, dropping missing or malformed hrefs."""
    links: List[str] = []
    for a in document.soup.find_all("a"):
        href: Optional[str] = a.get("href")
        target = to_url(href, base=document.url)
        if target is not None:
            links.append(target)
    return links


def extract_page_info(document: Document) -> PageInfo:
    """
    Extract title and links from a document.

    Raises:
        NoTitle: the document has no <title> element.
    """
    title_tag = document.soup.find("title")
    if title_tag is None:
        raise NoTitle()

    return PageInfo(
        title=title_tag.get_text().strip(),
        links=tuple(extract_links(document)),
    )
