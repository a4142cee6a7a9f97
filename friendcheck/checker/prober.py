"""Per-link page probing.

:func:`probe_link` walks the configured candidate paths of one friend site in
order, stops at the first page that carries a backlink marker, and classifies
the link.  Network problems never escape this module: every failed attempt
is reduced to an error code and folded into the result.
"""

from __future__ import annotations

import errno
import logging
import socket
import ssl
from typing import Callable, Optional

import httpx

from friendcheck.checker.matcher import match_backlink
from friendcheck.checker.models import CheckerConfig, Link, ProbeResult, ResultType

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

UNKNOWN_ERROR = "UNKNOWN"

# Checked in order, so subclasses must precede their bases.
_HTTPX_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (httpx.TimeoutException, "ETIMEDOUT"),
    (httpx.ProxyError, "ERR_PROXY"),
    (httpx.UnsupportedProtocol, "ERR_INVALID_URL"),
    # Without an errno in the chain a failed connect is almost always a refusal.
    (httpx.ConnectError, "ECONNREFUSED"),
    (httpx.ReadError, "ECONNRESET"),
    (httpx.WriteError, "EPIPE"),
    (httpx.RemoteProtocolError, "EPROTO"),
    (httpx.LocalProtocolError, "EPROTO"),
    (httpx.DecodingError, "ERR_BAD_RESPONSE"),
    (httpx.TooManyRedirects, "ERR_FR_TOO_MANY_REDIRECTS"),
    (httpx.InvalidURL, "ERR_INVALID_URL"),
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _find_os_error(exc: BaseException) -> OSError | None:
    """Return the first :class:`OSError` in the cause/context chain of *exc*."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, OSError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def error_code(exc: BaseException) -> str:
    """Reduce a transport exception to a short errno-style code.

    The underlying socket error wins when one is chained (``ECONNREFUSED``,
    ``ENOTFOUND`` for resolver failures, ``ERR_TLS`` for handshake and
    certificate problems); otherwise the httpx exception type decides.
    """
    os_error = _find_os_error(exc)
    if os_error is not None:
        if isinstance(os_error, ssl.SSLError):
            return "ERR_TLS"
        if isinstance(os_error, socket.gaierror):
            return "ENOTFOUND"
        if os_error.errno in errno.errorcode:
            return errno.errorcode[os_error.errno]

    for exc_type, code in _HTTPX_ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return UNKNOWN_ERROR


def _base_url(url: str) -> str:
    """Return *url* with exactly one trailing slash."""
    return url.rstrip("/") + "/"


def _emit(on_progress: Optional[ProgressCallback], url: str) -> None:
    if on_progress is not None:
        on_progress(url)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def probe_link(
    client: httpx.AsyncClient,
    link: Link,
    config: CheckerConfig,
    on_progress: Optional[ProgressCallback] = None,
) -> ProbeResult:
    """Probe every candidate page of *link* and classify the outcome.

    *on_progress* is called exactly ``len(config.pages)`` times: once with
    the probe URL before each fetch, and once with an empty string for each
    page skipped after an early match.

    Returns:
        ``success`` (``page`` set) when a page carries a current marker,
        ``old`` (``detected_old_domain`` set) when it carries a legacy one,
        ``fail`` (``error_codes`` set) when no page was reachable at all, and
        ``notFound`` when pages were reachable but none linked back.
    """
    base = _base_url(link.url)
    pages = config.pages
    failures: dict[int | str, None] = {}
    reachable = False
    attempted_url = ""

    for index, page in enumerate(pages):
        url = base + page
        attempted_url = url
        _emit(on_progress, url)

        try:
            response = await client.get(
                url,
                timeout=config.timeout,
                follow_redirects=config.follow_redirects,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            code = error_code(exc)
            logger.debug("%s failed: %s (%r)", url, code, exc)
            failures.setdefault(code)
            continue

        if not 200 <= response.status_code < 400:
            logger.debug("%s returned HTTP %d", url, response.status_code)
            failures.setdefault(response.status_code)
            continue

        reachable = True
        match = match_backlink(response.text, config.back_links, config.old_links)
        if not (match.is_current or match.is_legacy):
            continue

        for _ in range(len(pages) - index - 1):
            _emit(on_progress, "")

        if match.is_current:
            logger.debug("%s links back from %s", link.url, url)
            return ProbeResult(ResultType.SUCCESS, link, url, page=url)
        logger.debug("%s links to old domain %s from %s", link.url, match.matched_legacy, url)
        return ProbeResult(
            ResultType.OLD, link, url, detected_old_domain=match.matched_legacy
        )

    if not reachable:
        logger.debug("%s unreachable: %s", link.url, list(failures))
        return ProbeResult(
            ResultType.FAIL, link, attempted_url, error_codes=tuple(failures)
        )
    logger.debug("%s has no backlink", link.url)
    return ProbeResult(ResultType.NOT_FOUND, link, attempted_url)
