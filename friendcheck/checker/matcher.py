"""Backlink detection over raw page content."""

from __future__ import annotations

from typing import Iterable

from friendcheck.checker.models import BacklinkMatch


def match_backlink(
    content: str,
    back_links: Iterable[str],
    old_links: Iterable[str],
) -> BacklinkMatch:
    """Scan *content* for a current marker, then for a legacy one.

    Matching is plain substring containment over the whole body, so a marker
    that appears outside an ``<a>`` tag still counts.  Current markers win:
    legacy markers are only consulted when none of *back_links* is present.
    The first legacy marker found (in iteration order) is reported.
    """
    for marker in back_links:
        if marker in content:
            return BacklinkMatch(is_current=True)

    for marker in old_links:
        if marker in content:
            return BacklinkMatch(is_legacy=True, matched_legacy=marker)

    return BacklinkMatch()
