"""Data models for the backlink checker.

These are plain frozen dataclasses.  The engine never mutates a
:class:`Link`; outcome-specific fields live on :class:`ProbeResult` and are
merged into the link record only when serialising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Probing order.  The last entries are the most common names, so sites that
# use an unusual path are still found before the generic ones.
DEFAULT_PAGES: tuple[str, ...] = (
    "2bfriends",
    "friend-links",
    "friendLlinks",
    "pages/link",
    "pages/links",
    "friends",
    "social/link/",
    "site/link/",
    "youlian",
    "friendlychain",
    "links.html",
    "link",
    "links",
)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; friendcheck/1.0)"


class ResultType(str, Enum):
    SUCCESS = "success"
    OLD = "old"
    FAIL = "fail"
    NOT_FOUND = "notFound"


@dataclass(frozen=True)
class Link:
    """One entry scraped from the friend-links page."""

    name: str
    url: str
    avatar: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "url": self.url, "avatar": self.avatar}


@dataclass(frozen=True)
class CheckerConfig:
    """Immutable per-run configuration handed to the engine."""

    back_links: tuple[str, ...]
    old_links: tuple[str, ...] = ()
    pages: tuple[str, ...] = DEFAULT_PAGES
    concurrency: int = 100
    timeout: float = 12.0
    follow_redirects: bool = False
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        if not self.pages:
            raise ValueError("at least one candidate page is required")
        if not self.back_links:
            raise ValueError("at least one backlink marker is required")
        # A blank marker is a substring of every page.
        for name in ("pages", "back_links", "old_links"):
            if any(not entry.strip() for entry in getattr(self, name)):
                raise ValueError(f"{name} must not contain empty entries")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")


@dataclass(frozen=True)
class BacklinkMatch:
    """Outcome of scanning one page body for backlink markers."""

    is_current: bool = False
    is_legacy: bool = False
    matched_legacy: str | None = None


@dataclass(frozen=True)
class ProbeResult:
    """Terminal classification of one link."""

    type: ResultType
    link: Link
    attempted_url: str
    page: str | None = None
    detected_old_domain: str | None = None
    error_codes: tuple[int | str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Return the link record augmented with the outcome-specific field."""
        record = self.link.to_dict()
        if self.type is ResultType.SUCCESS:
            record["page"] = self.page
        elif self.type is ResultType.OLD:
            record["detectedOldDomain"] = self.detected_old_domain
        elif self.type is ResultType.FAIL:
            record["errorCodes"] = list(self.error_codes)
        return record


@dataclass(frozen=True)
class ProgressEvent:
    """One progress signal; ``url`` is empty for padded signals."""

    url: str
    probes_done: int
    probes_total: int
    finished_links: int
    total_links: int

    @property
    def percent(self) -> int:
        if self.probes_total == 0:
            return 0
        return self.probes_done * 100 // self.probes_total


@dataclass(frozen=True)
class Report:
    """Sealed four-category report."""

    success: tuple[ProbeResult, ...] = ()
    old: tuple[ProbeResult, ...] = ()
    fail: tuple[ProbeResult, ...] = ()
    not_found: tuple[ProbeResult, ...] = ()
    update_time: str = ""
    _by_type: dict[ResultType, tuple[ProbeResult, ...]] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "_by_type",
            {
                ResultType.SUCCESS: self.success,
                ResultType.OLD: self.old,
                ResultType.FAIL: self.fail,
                ResultType.NOT_FOUND: self.not_found,
            },
        )

    def __len__(self) -> int:
        return sum(len(results) for results in self._by_type.values())

    def category(self, result_type: ResultType) -> tuple[ProbeResult, ...]:
        return self._by_type[result_type]

    def counts(self) -> dict[str, int]:
        return {t.value: len(results) for t, results in self._by_type.items()}

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the exported JSON shape."""
        data: dict[str, Any] = {
            t.value: [r.to_dict() for r in results]
            for t, results in self._by_type.items()
        }
        data["updateTime"] = self.update_time
        return data
