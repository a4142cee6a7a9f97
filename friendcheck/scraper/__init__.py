"""Scraper package - friend-links page fetch & parsing."""

from friendcheck.scraper.extractor import extract_links, load_links
from friendcheck.scraper.fetcher import LinkPageError, fetch_link_page

__all__ = ["fetch_link_page", "extract_links", "load_links", "LinkPageError"]
