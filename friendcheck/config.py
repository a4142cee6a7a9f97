"""Centralised settings for the friendcheck tool.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The engine itself never reads :data:`settings`; callers turn it into an
immutable :class:`~friendcheck.checker.models.CheckerConfig` with
:meth:`Settings.checker_config` and pass that in explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from friendcheck.checker.models import DEFAULT_PAGES, CheckerConfig

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_list(name: str, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    """Read a comma-separated environment variable as a tuple of strings."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Source page
    # ------------------------------------------------------------------
    link_page: str = field(
        default_factory=lambda: os.environ.get("FRIENDCHECK_LINK_PAGE", "")
    )
    ignore: tuple[str, ...] = field(
        default_factory=lambda: _env_list("FRIENDCHECK_IGNORE", ("hexo.io",))
    )

    # ------------------------------------------------------------------
    # Backlink markers
    # ------------------------------------------------------------------
    back_links: tuple[str, ...] = field(
        default_factory=lambda: _env_list("FRIENDCHECK_BACKLINKS")
    )
    old_links: tuple[str, ...] = field(
        default_factory=lambda: _env_list("FRIENDCHECK_OLD_LINKS")
    )

    # ------------------------------------------------------------------
    # Prober
    # ------------------------------------------------------------------
    pages: tuple[str, ...] = field(
        default_factory=lambda: _env_list("FRIENDCHECK_PAGES", DEFAULT_PAGES)
    )
    concurrency: int = field(
        default_factory=lambda: int(os.environ.get("FRIENDCHECK_CONCURRENCY", "100"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("FRIENDCHECK_TIMEOUT", "12.0"))
    )
    follow_redirects: bool = field(
        default_factory=lambda: _env_bool("FRIENDCHECK_FOLLOW_REDIRECTS")
    )

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    export_path: Path | None = field(
        default_factory=lambda: (
            Path(os.environ["FRIENDCHECK_EXPORT_PATH"])
            if os.environ.get("FRIENDCHECK_EXPORT_PATH")
            else None
        )
    )

    def checker_config(self) -> CheckerConfig:
        """Freeze the prober-related settings into a :class:`CheckerConfig`.

        Raises:
            ValueError: If the settings do not form a usable configuration
                (no markers, no pages, non-positive concurrency or timeout).
        """
        return CheckerConfig(
            pages=tuple(self.pages),
            back_links=tuple(self.back_links),
            old_links=tuple(self.old_links),
            concurrency=self.concurrency,
            timeout=self.request_timeout,
            follow_redirects=self.follow_redirects,
        )


# Module-level singleton - import this everywhere:
#   from friendcheck.config import settings
settings = Settings()
