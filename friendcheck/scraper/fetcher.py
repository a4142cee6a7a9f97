"""HTTP fetcher for the owner's friend-links page."""

from __future__ import annotations

import httpx

from friendcheck.checker.models import DEFAULT_USER_AGENT
from friendcheck.config import settings

_DEFAULT_HEADERS = {"User-Agent": DEFAULT_USER_AGENT}


class LinkPageError(Exception):
    """The friend-links page could not be fetched or parsed."""


def fetch_link_page(url: str, timeout: float | None = None) -> str:
    """Fetch *url* and return its HTML.

    *timeout* defaults to ``settings.request_timeout``.

    Redirects are followed here (unlike when probing friend sites) since this
    is the owner's own page.

    Raises:
        LinkPageError: If the request fails or the server returns a 4xx/5xx
            status code.
    """
    try:
        with httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=settings.request_timeout if timeout is None else timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
            response.raise_for_status()
            return response.text
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise LinkPageError(f"could not fetch {url}: {exc}") from exc
