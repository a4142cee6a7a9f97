"""Checker package - backlink verification engine."""

from friendcheck.checker.matcher import match_backlink
from friendcheck.checker.models import (
    BacklinkMatch,
    CheckerConfig,
    Link,
    ProbeResult,
    ProgressEvent,
    Report,
    ResultType,
)
from friendcheck.checker.pool import run_all
from friendcheck.checker.prober import probe_link
from friendcheck.checker.report import ProgressTracker, ReportBuilder
from friendcheck.checker.runner import check_link, check_links

__all__ = [
    "match_backlink",
    "probe_link",
    "run_all",
    "check_links",
    "check_link",
    "ReportBuilder",
    "ProgressTracker",
    "BacklinkMatch",
    "CheckerConfig",
    "Link",
    "ProbeResult",
    "ProgressEvent",
    "Report",
    "ResultType",
]
