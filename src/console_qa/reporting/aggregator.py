"""
Dashboard Aggregator - reduces a raw run report into dashboard data.

Reads:  reports/run-report.json
Writes: docs/data/latest.json            (overwritten)
        docs/history/runs.json           (newest first, capped at 100)
        docs/exports/current-run.csv     (regenerated)
        docs/exports/all-runs-summary.csv (regenerated)

The aggregator is the only writer of the snapshot and history files.

Example Usage:
    >>> from console_qa.reporting.aggregator import DashboardAggregator
    >>>
    >>> aggregator = DashboardAggregator(ArtifactPaths(root=Path(".")))
    >>> result = aggregator.run()
    >>> result.snapshot.pass_rate
    94
"""
from __future__ import annotations

import json
import logging
import math
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import ArtifactPaths
from ..models.outcome import TestOutcome, TestStatus
from ..models.run_snapshot import ModuleSummary, RunSnapshot, RunSummary
from .csv_export import render_all_runs_csv, render_current_run_csv, write_csv
from .extractor import extract_outcomes
from .history import MAX_HISTORY, RunHistory


__all__ = [
    "AggregationResult",
    "DashboardAggregator",
    "ReportNotFoundError",
    "compute_pass_rate",
    "summarize",
    "summarize_modules",
]

logger = logging.getLogger(__name__)


_COUNTER_FIELDS = {
    TestStatus.PASSED.value: "passed",
    TestStatus.FAILED.value: "failed",
    TestStatus.SKIPPED.value: "skipped",
    TestStatus.TIMED_OUT.value: "timed_out",
}


class ReportNotFoundError(FileNotFoundError):
    """The raw run report does not exist; the suite has not been run."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Report not found: {path}")
        self.path = path


class AggregationResult(BaseModel):
    """
    Files written by one aggregation pass.

    Attributes:
        snapshot: The latest run snapshot.
        history_length: Number of retained history entries.
        written: Paths written, in write order.
    """
    snapshot: RunSnapshot
    history_length: int = Field(ge=0)
    written: List[Path] = Field(default_factory=list)


def compute_pass_rate(passed: int, total: int) -> int:
    """Integer percent rounded half up; 0 for an empty run."""
    if total <= 0:
        return 0
    return int(math.floor(passed / total * 100 + 0.5))


def _count(tests: List[TestOutcome], summary: RunSummary) -> None:
    for test in tests:
        field = _COUNTER_FIELDS.get(test.status, "failed")
        setattr(summary, field, getattr(summary, field) + 1)
        summary.total += 1


def summarize(tests: List[TestOutcome]) -> RunSummary:
    """Grand totals over all outcomes."""
    summary = RunSummary()
    _count(tests, summary)
    return summary


def summarize_modules(tests: List[TestOutcome]) -> Dict[str, ModuleSummary]:
    """Per-module counters in first-seen order, labelled by the first test seen."""
    grouped: Dict[str, List[TestOutcome]] = {}
    labels: Dict[str, str] = {}
    for test in tests:
        grouped.setdefault(test.module, []).append(test)
        labels.setdefault(test.module, test.module_label)

    modules = {}
    for key, module_tests in grouped.items():
        summary = ModuleSummary(label=labels[key])
        _count(module_tests, summary)
        modules[key] = summary
    return modules


class DashboardAggregator:
    """
    Builds and persists the dashboard state from a raw run report.

    Attributes:
        paths: Artifact locations.
        history_limit: Maximum retained history entries.
    """

    def __init__(self, paths: ArtifactPaths, history_limit: int = MAX_HISTORY) -> None:
        self.paths = paths
        self.history_limit = history_limit

    def load_report(self, report_path: Optional[Path] = None) -> Dict[str, Any]:
        """
        Read the raw run report.

        Raises:
            ReportNotFoundError: If the report file does not exist.
        """
        path = report_path or self.paths.report
        if not path.exists():
            raise ReportNotFoundError(path)
        return json.loads(path.read_text(encoding="utf-8"))

    def build_snapshot(self, report: Dict[str, Any]) -> RunSnapshot:
        """Reduce a raw report into a fresh, immutable-by-convention snapshot."""
        tests = extract_outcomes(report)
        summary = summarize(tests)
        stats = report.get("stats") or {}

        started_at = stats.get("startTime") or datetime.now(timezone.utc).isoformat()
        duration_ms = stats.get("duration")
        if duration_ms is None:
            duration_ms = sum(test.duration_ms for test in tests)

        return RunSnapshot(
            run_id=str(uuid.uuid4()),
            started_at=started_at,
            duration_ms=max(int(duration_ms), 0),
            summary=summary,
            pass_rate=compute_pass_rate(summary.passed, summary.total),
            modules=summarize_modules(tests),
            tests=tests,
        )

    def write(self, snapshot: RunSnapshot) -> AggregationResult:
        """Persist the snapshot, the updated history and both CSV exports."""
        written = []

        latest_path = self.paths.latest
        latest_path.parent.mkdir(parents=True, exist_ok=True)
        latest_path.write_text(
            json.dumps(snapshot.to_json_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        written.append(latest_path)
        logger.info(f"Written: {latest_path}")

        history = RunHistory.load(self.paths.history, limit=self.history_limit)
        history.insert(snapshot.to_history_entry())
        history.save(self.paths.history)
        written.append(self.paths.history)
        logger.info(f"Written: {self.paths.history} ({len(history)} runs)")

        written.append(write_csv(self.paths.current_run_csv, render_current_run_csv(snapshot.tests)))
        logger.info(f"Written: {self.paths.current_run_csv}")

        written.append(write_csv(self.paths.all_runs_csv, render_all_runs_csv(history)))
        logger.info(f"Written: {self.paths.all_runs_csv}")

        return AggregationResult(
            snapshot=snapshot,
            history_length=len(history),
            written=written,
        )

    def run(self, report_path: Optional[Path] = None) -> AggregationResult:
        """Load the report, build the snapshot and write every artifact."""
        report = self.load_report(report_path)
        snapshot = self.build_snapshot(report)
        result = self.write(snapshot)

        summary = snapshot.summary
        logger.info(
            f"Dashboard data generated: {summary.total} tests "
            f"({summary.passed} passed, {summary.failed} failed, "
            f"{snapshot.pass_rate}% pass rate)"
        )
        return result
