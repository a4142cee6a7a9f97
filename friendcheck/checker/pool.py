"""Fixed-size worker pool that drains a queue of links."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, Optional

from friendcheck.checker.models import Link, ProbeResult

ProbeFn = Callable[[Link], Awaitable[ProbeResult]]
ResultCallback = Callable[[ProbeResult], None]


async def run_all(
    links: Iterable[Link],
    concurrency: int,
    probe_fn: ProbeFn,
    on_result: Optional[ResultCallback] = None,
) -> list[ProbeResult]:
    """Probe every link with exactly *concurrency* workers.

    Each worker claims the next unclaimed link, awaits *probe_fn* on it,
    files the result, and repeats until the queue is empty.  Claiming is a
    single ``get_nowait`` call, so no link is ever processed twice.

    Args:
        links: Links to probe, claimed in FIFO order.
        concurrency: Number of workers; also the maximum number of links in
            flight at once.
        probe_fn: Coroutine function classifying one link.  It is expected to
            handle its own network errors; an exception raised here is a bug
            and propagates out of the pool.
        on_result: Optional callback invoked with each result as soon as it
            is produced.

    Returns:
        All results in completion order.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    queue: asyncio.Queue[Link] = asyncio.Queue()
    for link in links:
        queue.put_nowait(link)

    results: list[ProbeResult] = []

    async def worker() -> None:
        while True:
            try:
                link = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            result = await probe_fn(link)
            results.append(result)
            if on_result is not None:
                on_result(result)

    await asyncio.gather(*(worker() for _ in range(concurrency)))
    return results
