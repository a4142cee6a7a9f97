"""Persist a sealed report as JSON."""

from __future__ import annotations

import json
from pathlib import Path

from friendcheck.checker.models import Report


def report_to_json(report: Report) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)


def write_report(report: Report, path: Path) -> Path:
    """Write *report* to *path*, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report_to_json(report), encoding="utf-8")
    return path
