"""
Breadth-first web crawler yielding each page's title and links, one page at a time.
"""
__version__ = "1.0.0"

from webwalk.core import crawl, Crawler, CrawlStats
from webwalk.errors import ExtractError, FetchError
from webwalk.extractor import PageInfo, extract_page_info
from webwalk.fetcher import Document, Fetcher, fetch_page

__all__ = [
    "crawl",
    "Crawler",
    "CrawlStats",
    "Document",
    "ExtractError",
    "FetchError",
    "Fetcher",
    "PageInfo",
    "extract_page_info",
    "fetch_page",
]
