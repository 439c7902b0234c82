"""
Core crawling logic and data structures.
"""
from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Iterator, Optional, Set, Tuple, Union

from webwalk.errors import ExtractError, FetchError, WebwalkError
from webwalk.extractor import PageInfo, extract_page_info
from webwalk.fetcher import Document, Fetcher
from webwalk.urls import to_url

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], Document]
ExtractFn = Callable[[Document], PageInfo]


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_crawled: int = 0
    pages_skipped: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_page(self) -> None:
        self.pages_crawled += 1

    def record_skip(self, reason: WebwalkError) -> None:
        """Record a skipped URL by error kind."""
        self.pages_skipped += 1
        self.error_counts[type(reason).__name__] += 1


@dataclass(frozen=True, slots=True)
class Visited:
    page: PageInfo


@dataclass(frozen=True, slots=True)
class Skipped:
    reason: WebwalkError


Outcome = Union[Visited, Skipped]


class Crawler:
    """
    Breadth-first crawl from a seed URL, produced lazily.

    Iterating yields one (url, PageInfo) pair per page that was fetched and
    extracted successfully. Pages that fail either step are skipped silently
    and the crawl carries on with the rest of the frontier. Each `next()` runs
    as many fetches as it takes to produce one page, then suspends.

    The crawler is its own iterator: once exhausted it stays exhausted.

    Args:
        seed: Start URL. If it can't be parsed the crawl is empty.
        fetch: Callable returning a Document for a URL or raising FetchError.
               Defaults to a Fetcher created on the first fetch and released
               by `close()`.
        extract: Callable returning PageInfo for a Document or raising ExtractError.
    """

    def __init__(
        self,
        seed: object,
        fetch: Optional[FetchFn] = None,
        extract: ExtractFn = extract_page_info,
    ) -> None:
        self._owned_fetcher: Optional[Fetcher] = None
        self._fetch = fetch
        self._extract = extract

        self._frontier: Deque[str] = deque()
        self._visited: Set[str] = set()
        self.stats = CrawlStats()

        start_url = to_url(seed)
        if start_url is None:
            logger.debug("Unparseable seed %r, nothing to crawl", seed)
        else:
            self._frontier.append(start_url)

    @property
    def exhausted(self) -> bool:
        """True once no unvisited URL is left to crawl."""
        while self._frontier and self._frontier[0] in self._visited:
            self._frontier.popleft()
        return not self._frontier

    def __iter__(self) -> Iterator[Tuple[str, PageInfo]]:
        return self

    def __next__(self) -> Tuple[str, PageInfo]:
        result = self.advance()
        if result is None:
            raise StopIteration
        return result

    def advance(self) -> Optional[Tuple[str, PageInfo]]:
        """Process frontier URLs until one yields a page; None when the frontier is empty."""
        while self._frontier:
            url = self._frontier.popleft()

            # Same URL queued from two parents before either was processed
            if url in self._visited:
                continue
            self._visited.add(url)

            outcome = self._visit(url)
            if isinstance(outcome, Skipped):
                logger.debug("Skipped %s: %s", url, outcome.reason)
                self.stats.record_skip(outcome.reason)
                continue

            page = outcome.page
            new_links = self._enqueue(page)
            self.stats.record_page()
            logger.info("Crawled %s %r (+%d links)", url, page.title, new_links)
            return url, page

        return None

    def _visit(self, url: str) -> Outcome:
        if self._fetch is None:
            # Session is only opened once there is something to fetch
            self._owned_fetcher = Fetcher()
            self._fetch = self._owned_fetcher.fetch
        try:
            document = self._fetch(url)
            return Visited(self._extract(document))
        except (FetchError, ExtractError) as e:
            return Skipped(e)

    def _enqueue(self, page: PageInfo) -> int:
        """Queue links not yet visited, in page order. Returns how many were queued."""
        count = 0
        for link in page.links:
            if link not in self._visited:
                self._frontier.append(link)
                count += 1
        return count

    def close(self) -> None:
        """Release the fetcher if this crawler created it."""
        if self._owned_fetcher is not None:
            self._owned_fetcher.close()

    def __enter__(self) -> "Crawler":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def crawl(
    start_url: object,
    fetch: Optional[FetchFn] = None,
    extract: ExtractFn = extract_page_info,
) -> Crawler:
    """
    Crawl linked pages breadth-first starting from a URL.

    Returns:
        A lazy iterator of (url, PageInfo) pairs. Without a fetch callable it
        opens an HTTP session on the first page; close it (or use `with`).
    """
    return Crawler(start_url, fetch=fetch, extract=extract)
