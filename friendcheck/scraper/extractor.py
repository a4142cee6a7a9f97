"""Friend-link extraction: turns the links page HTML into :class:`Link` records.

The markup understood here is the AnZhiYu Hexo theme's friend-links page::

    <div class="flink">
      <h2>Group name (3)</h2>
      <div class="anzhiyu-flink-list">
        <div class="flink-list-item">
          <a class="cf-friends-link" href="https://friend.example/">
            <img src="https://friend.example/avatar.png">
            <span class="flink-item-name">Friend</span>
          </a>
        </div>
      </div>
    </div>
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List

from bs4 import BeautifulSoup, Tag

from friendcheck.checker.models import Link
from friendcheck.scraper.fetcher import fetch_link_page

logger = logging.getLogger(__name__)

# The owner's own card lives in this group.
OWNER_GROUP = "我的信息"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _group_name(heading: Tag) -> str:
    """Return the heading text without whitespace or a ``(count)`` suffix."""
    name = re.sub(r"\s+", "", heading.get_text())
    return re.sub(r"\(.*\)", "", name).strip()


def _is_ignored(url: str, ignore: Iterable[str]) -> bool:
    return any(domain in url for domain in ignore)


def _parse_item(item: Tag) -> Link | None:
    anchor = item.select_one("a.cf-friends-link")
    if anchor is None:
        return None
    name_tag = anchor.select_one(".flink-item-name")
    name = name_tag.get_text().strip() if name_tag else ""
    url = anchor.get("href") or anchor.get("cf-href") or ""
    img = anchor.find("img")
    avatar = (img.get("src") or img.get("cf-src") or "") if img else ""
    if not url:
        logger.warning("Skipping friend link %r: no URL", name)
        return None
    return Link(name=name, url=url.strip(), avatar=avatar)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_links(html: str, ignore: Iterable[str] = ()) -> List[Link]:
    """Parse every friend link out of *html*, in page order.

    Links whose URL contains any of the *ignore* substrings are dropped, as
    is the owner's own group.
    """
    ignore = tuple(ignore)
    soup = BeautifulSoup(html, "html.parser")
    links: List[Link] = []

    for heading in soup.select(".flink > h2"):
        if _group_name(heading) == OWNER_GROUP:
            continue
        flink_list = heading.find_next_sibling()
        if flink_list is None or "anzhiyu-flink-list" not in (flink_list.get("class") or []):
            continue
        for item in flink_list.select(".flink-list-item"):
            link = _parse_item(item)
            if link is None or _is_ignored(link.url, ignore):
                continue
            links.append(link)

    return links


def load_links(
    url: str,
    ignore: Iterable[str] = (),
    timeout: float | None = None,
) -> List[Link]:
    """Fetch the friend-links page at *url* and extract its links.

    Raises:
        LinkPageError: If the page cannot be fetched.
    """
    links = extract_links(fetch_link_page(url, timeout), ignore)
    logger.info("Found %d friend link(s) on %s", len(links), url)
    return links
