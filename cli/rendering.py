"""Utilities for rendering check progress and results in the CLI."""

from __future__ import annotations

import shutil
import sys
from typing import TextIO

import typer

from friendcheck.checker.models import ProbeResult, ProgressEvent, Report, ResultType

_MIN_BAR = 10


def render_progress(event: ProgressEvent, width: int = 80, color: bool = False) -> str:
    """Render *event* as a single progress line.

    Example::

        [=========>          ] https://a.example/links 13/26(50%) [1/2]

    The bar takes whatever room the URL and counters leave on a line of
    *width* columns, but never less than ten cells.
    """
    info = (
        f"{event.probes_done}/{event.probes_total}({event.percent}%) "
        f"[{event.finished_links}/{event.total_links}]"
    )
    bar_max = max(_MIN_BAR, width - len(info) - len(event.url) - 5)
    filled = bar_max * event.percent // 100
    if filled >= bar_max:
        bar = "=" * bar_max
    else:
        bar = "=" * filled + ">" + " " * (bar_max - filled - 1)

    url = event.url
    if color:
        bar = typer.style(bar, fg=typer.colors.GREEN)
        url = typer.style(url, fg=typer.colors.CYAN)
    return f"[{bar}] {url} {info}"


class ProgressPrinter:
    """Progress listener that draws :func:`render_progress` lines.

    On a terminal the line is redrawn in place; anywhere else (pipes, CI
    logs) each event is written on its own line.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout
        self._tty = self._stream.isatty()

    def __call__(self, event: ProgressEvent) -> None:
        width = shutil.get_terminal_size((80, 24)).columns
        line = render_progress(event, width, color=self._tty)
        if self._tty:
            self._stream.write("\r\x1b[2K" + line)
            if event.probes_done == event.probes_total:
                self._stream.write("\n")
            self._stream.flush()
        else:
            self._stream.write(line + "\n")


_ICONS = {
    ResultType.SUCCESS: "✅",
    ResultType.OLD: "🕰️",
    ResultType.FAIL: "❌",
    ResultType.NOT_FOUND: "🔍",
}


def describe_result(result: ProbeResult) -> str:
    """One-line human description of a single link's outcome."""
    icon = _ICONS[result.type]
    label = f"{icon} [{result.type.value}] {result.link.name or result.link.url}"
    if result.type is ResultType.SUCCESS:
        return f"{label}  backlink on {result.page}"
    if result.type is ResultType.OLD:
        return f"{label}  links to old domain {result.detected_old_domain!r} on {result.attempted_url}"
    if result.type is ResultType.FAIL:
        codes = ", ".join(str(code) for code in result.error_codes)
        return f"{label}  unreachable ({codes})"
    return f"{label}  no backlink found (last tried {result.attempted_url})"


def render_summary(report: Report) -> str:
    counts = report.counts()
    parts = "  ".join(f"{_ICONS[t]} {t.value}: {counts[t.value]}" for t in ResultType)
    return f"{parts}  (total {len(report)})"
