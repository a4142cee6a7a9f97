"""Incremental report assembly and progress accounting."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from friendcheck.checker.models import ProbeResult, ProgressEvent, Report, ResultType

ProgressListener = Callable[[ProgressEvent], None]


def utc_timestamp(now: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and ``Z``."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class ReportBuilder:
    """Files results by category and seals them into a :class:`Report`."""

    def __init__(self) -> None:
        self._results: dict[ResultType, list[ProbeResult]] = {t: [] for t in ResultType}
        self._sealed = False

    def add(self, result: ProbeResult) -> None:
        if self._sealed:
            raise RuntimeError("cannot add results to a sealed report")
        self._results[result.type].append(result)

    def __len__(self) -> int:
        return sum(len(results) for results in self._results.values())

    def seal(self, now: datetime | None = None) -> Report:
        """Stamp the completion time and return the immutable report.

        Raises:
            RuntimeError: If the report was already sealed.
        """
        if self._sealed:
            raise RuntimeError("report already sealed")
        self._sealed = True
        return Report(
            success=tuple(self._results[ResultType.SUCCESS]),
            old=tuple(self._results[ResultType.OLD]),
            fail=tuple(self._results[ResultType.FAIL]),
            not_found=tuple(self._results[ResultType.NOT_FOUND]),
            update_time=utc_timestamp(now),
        )


class ProgressTracker:
    """Shared probe/link counters for one run.

    Counter updates happen synchronously inside the callbacks, with no
    ``await`` in between, so concurrent workers on one event loop can never
    interleave a read and a write.
    """

    def __init__(
        self,
        total_links: int,
        pages_per_link: int,
        listener: Optional[ProgressListener] = None,
    ) -> None:
        self.total_links = total_links
        self.probes_total = total_links * pages_per_link
        self.probes_done = 0
        self.finished_links = 0
        self._listener = listener

    def snapshot(self, url: str = "") -> ProgressEvent:
        return ProgressEvent(
            url=url,
            probes_done=self.probes_done,
            probes_total=self.probes_total,
            finished_links=self.finished_links,
            total_links=self.total_links,
        )

    def probe(self, url: str) -> None:
        """Record one probe signal (empty *url* for a padded one)."""
        self.probes_done += 1
        if self._listener is not None:
            self._listener(self.snapshot(url))

    def link_finished(self) -> None:
        self.finished_links += 1
