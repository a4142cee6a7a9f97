"""High-level entry points for a backlink check run.

:func:`check_links` is what callers use: it opens one shared HTTP client,
runs the worker pool over the links, and returns the sealed report.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

import httpx

from friendcheck.checker.models import CheckerConfig, Link, ProbeResult, Report
from friendcheck.checker.pool import run_all
from friendcheck.checker.prober import probe_link
from friendcheck.checker.report import ProgressListener, ProgressTracker, ReportBuilder

logger = logging.getLogger(__name__)


def make_client(config: CheckerConfig) -> httpx.AsyncClient:
    """Build the async client shared by every worker of a run."""
    return httpx.AsyncClient(
        headers={"User-Agent": config.user_agent},
        timeout=config.timeout,
        follow_redirects=config.follow_redirects,
        limits=httpx.Limits(max_connections=config.concurrency),
    )


@asynccontextmanager
async def _client_scope(
    config: CheckerConfig, client: Optional[httpx.AsyncClient]
) -> AsyncIterator[httpx.AsyncClient]:
    # A caller-supplied client stays open; it belongs to the caller.
    if client is not None:
        yield client
        return
    async with make_client(config) as own:
        yield own


async def check_links(
    links: Iterable[Link],
    config: CheckerConfig,
    on_progress: Optional[ProgressListener] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Report:
    """Verify every link in *links* and return the sealed :class:`Report`.

    Args:
        links: Friend links to check.  Never mutated.
        config: Candidate pages, markers, concurrency and timeout.
        on_progress: Receives a :class:`ProgressEvent` for every candidate
            page of every link, ``len(links) * len(config.pages)`` in total.
        client: Optional pre-built client (tests inject a mocked one).

    Returns:
        The report, with categories ordered by completion time and
        ``update_time`` stamped once all links are done.
    """
    links = list(links)
    builder = ReportBuilder()
    tracker = ProgressTracker(len(links), len(config.pages), on_progress)

    def file_result(result: ProbeResult) -> None:
        builder.add(result)
        tracker.link_finished()

    logger.info(
        "Checking %d link(s) across %d candidate page(s) with %d worker(s)",
        len(links),
        len(config.pages),
        config.concurrency,
    )

    async with _client_scope(config, client) as http:

        async def probe(link: Link) -> ProbeResult:
            return await probe_link(http, link, config, tracker.probe)

        await run_all(links, config.concurrency, probe, file_result)

    report = builder.seal()
    logger.info("Check finished: %s", report.counts())
    return report


async def check_link(
    link: Link,
    config: CheckerConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> ProbeResult:
    """Probe a single link outside of a full run."""
    async with _client_scope(config, client) as http:
        return await probe_link(http, link, config)
