"""friendcheck CLI - entry-point for backlink checks.

Usage:
    python cli/main.py --help

Commands:
    check   → scrape the friend-links page, probe every friend, export report
    probe   → probe a single friend site and print its classification
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from friendcheck.xxx import
# ...` works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import dataclasses
import logging
from typing import Any, List, Optional

import typer

from cli.rendering import ProgressPrinter, describe_result, render_summary
from friendcheck.checker import CheckerConfig, Link, check_link, check_links
from friendcheck.config import Settings, settings
from friendcheck.export import report_to_json, write_report
from friendcheck.scraper import LinkPageError, load_links

app = typer.Typer(
    name="friendcheck",
    help="Verify that friend links link back to your site.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _with_overrides(**overrides: Any) -> Settings:
    """Return a copy of the global settings with CLI overrides applied.

    ``None`` and empty lists mean "option not given".
    """
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        if value is None or value == []:
            continue
        changes[key] = tuple(value) if isinstance(value, list) else value
    return dataclasses.replace(settings, **changes)


def _checker_config(resolved: Settings) -> CheckerConfig:
    try:
        return resolved.checker_config()
    except ValueError as exc:
        typer.echo(f"❌ Invalid configuration: {exc}")
        raise typer.Exit(code=2)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@app.command("check")
def check(
    link_page: Optional[str] = typer.Option(None, "--link-page", help="URL of your friend-links page."),
    backlink: Optional[List[str]] = typer.Option(None, "--backlink", help="Current domain marker (repeatable)."),
    old_link: Optional[List[str]] = typer.Option(None, "--old-link", help="Legacy domain marker (repeatable)."),
    page: Optional[List[str]] = typer.Option(None, "--page", help="Candidate sub-page, in probing order (repeatable)."),
    ignore: Optional[List[str]] = typer.Option(None, "--ignore", help="Skip friend URLs containing this (repeatable)."),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", help="Number of links checked at once."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-request timeout in seconds."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON report here."),
    stdout: bool = typer.Option(False, "--stdout", help="Print the JSON report instead of writing it."),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show a progress bar on stderr."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Check every friend link on the links page for a backlink."""
    _configure_logging(verbose)
    resolved = _with_overrides(
        link_page=link_page,
        back_links=backlink,
        old_links=old_link,
        pages=page,
        ignore=ignore,
        concurrency=concurrency,
        request_timeout=timeout,
        export_path=output,
    )
    if not resolved.link_page:
        typer.echo("❌ No friend-links page configured (use --link-page or FRIENDCHECK_LINK_PAGE).")
        raise typer.Exit(code=2)
    config = _checker_config(resolved)
    # With the report on stdout, every other line goes to stderr.
    to_stdout = stdout or resolved.export_path is None

    typer.echo(f"[check] Fetching {resolved.link_page!r} …", err=to_stdout)
    try:
        links = load_links(resolved.link_page, resolved.ignore, timeout=resolved.request_timeout)
    except LinkPageError as exc:
        typer.echo(f"❌ Failed to load friend links: {exc}")
        raise typer.Exit(code=1)
    typer.echo(f"[check] Probing {len(links)} link(s) × {len(config.pages)} page(s) …", err=to_stdout)

    listener = ProgressPrinter(sys.stderr) if progress else None
    report = asyncio.run(check_links(links, config, on_progress=listener))

    if to_stdout:
        typer.echo(report_to_json(report))
    else:
        path = write_report(report, resolved.export_path)
        typer.echo(f"[check] Report written to {path}")
    typer.echo(render_summary(report), err=to_stdout)


@app.command("probe")
def probe(
    url: str = typer.Argument(..., help="Base URL of the friend site."),
    name: str = typer.Option("", "--name", help="Display name for the site."),
    backlink: Optional[List[str]] = typer.Option(None, "--backlink", help="Current domain marker (repeatable)."),
    old_link: Optional[List[str]] = typer.Option(None, "--old-link", help="Legacy domain marker (repeatable)."),
    page: Optional[List[str]] = typer.Option(None, "--page", help="Candidate sub-page, in probing order (repeatable)."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-request timeout in seconds."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Probe a single friend site and print how it classifies."""
    _configure_logging(verbose)
    resolved = _with_overrides(
        back_links=backlink,
        old_links=old_link,
        pages=page,
        request_timeout=timeout,
    )
    config = _checker_config(resolved)

    result = asyncio.run(check_link(Link(name=name, url=url), config))
    typer.echo(describe_result(result))


if __name__ == "__main__":
    app()
