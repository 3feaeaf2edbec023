"""
Flat CSV exports of the dashboard data.

- current-run.csv: one row per test of the latest run
- all-runs-summary.csv: one row per retained history entry, newest first

String fields are double-quoted (embedded quotes doubled), numbers are bare.
Both files are regenerated from scratch on every run.
"""
from __future__ import annotations

import csv
import io
from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from ..models.outcome import TestOutcome
from ..models.run_snapshot import RunHistoryEntry
from .classifier import split_title


__all__ = [
    "CURRENT_RUN_HEADER",
    "ALL_RUNS_HEADER",
    "format_run_date",
    "render_all_runs_csv",
    "render_current_run_csv",
    "write_csv",
]


CURRENT_RUN_HEADER = ["Test ID", "Test Name", "Module", "Status", "Duration (ms)", "Error"]
ALL_RUNS_HEADER = [
    "Run ID", "Date", "Total", "Passed", "Failed",
    "Skipped", "Timed Out", "Pass Rate (%)", "Duration (ms)",
]


def format_run_date(started_at: datetime) -> str:
    """Local time as ``2/19/2026, 2:30:00 PM``."""
    local = started_at.astimezone() if started_at.tzinfo else started_at
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{local.month}/{local.day}/{local.year}, "
        f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem}"
    )


def _single_line(text: str) -> str:
    return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def _render(header: List[str], rows: Iterable[list]) -> str:
    buffer = io.StringIO()
    buffer.write(",".join(header) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def render_current_run_csv(tests: Iterable[TestOutcome]) -> str:
    """CSV text for the tests of one run."""
    rows = []
    for test in tests:
        test_id, name = split_title(test.title, default_id="")
        rows.append([
            test_id,
            name,
            test.module_label,
            test.status,
            test.duration_ms,
            _single_line(test.error),
        ])
    return _render(CURRENT_RUN_HEADER, rows)


def render_all_runs_csv(history: Iterable[RunHistoryEntry]) -> str:
    """CSV text with one summary row per history entry."""
    rows = []
    for entry in history:
        summary = entry.summary
        rows.append([
            entry.run_id,
            format_run_date(entry.started_at),
            summary.total,
            summary.passed,
            summary.failed,
            summary.skipped,
            summary.timed_out,
            entry.pass_rate,
            entry.duration_ms,
        ])
    return _render(ALL_RUNS_HEADER, rows)


def write_csv(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
