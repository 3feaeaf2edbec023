"""
pytest plugin connecting console scenarios to the reporting pipeline.

Registered through the ``pytest11`` entry point. Always active:
- ``title`` marker for structured test titles (``TC_API_01 - Name``)
- phase reports stashed on the item so fixtures can react to failures

Active with ``--console-report``:
- every finished attempt (setup + call + teardown) is fed live to the
  RunRecorder and the RunReportWriter
- at session end the nested run report is written and the recorder flushed
  to the spreadsheet (or printed as a console table)

Example Usage:
    $ pytest tests/e2e -m e2e --console-report
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Dict, List, Optional, Tuple

import pytest
from dotenv import load_dotenv

from .config import ConsoleQAConfig
from .models.outcome import Attachment, AttemptRecord, TestStatus
from .reporting.recorder import RunRecorder
from .reporting.run_report import RunReportWriter


__all__ = [
    "ATTACHMENT_PROPERTY",
    "ConsoleReportPlugin",
    "attempt_status",
    "call_failed",
    "item_title",
    "phase_report_key",
    "suite_label",
]

logger = logging.getLogger(__name__)


ATTACHMENT_PROPERTY = "attachment"
TIMEOUT_MARKER = "Timeout >"
RERUN_OUTCOME = "rerun"
PHASES = ("setup", "call", "teardown")

phase_report_key = pytest.StashKey[Dict[str, pytest.TestReport]]()


# =============================================================================
# Item metadata
# =============================================================================

def _first_line(doc: Optional[str]) -> str:
    for line in (doc or "").strip().splitlines():
        if line.strip():
            return line.strip()
    return ""


def item_title(item: pytest.Item) -> str:
    """Title from the ``title`` marker, the first docstring line, or the name."""
    marker = item.get_closest_marker("title")
    if marker and marker.args:
        return str(marker.args[0])
    obj = getattr(item, "obj", None)
    return _first_line(getattr(obj, "__doc__", None)) or item.name


def suite_label(item: pytest.Item) -> str:
    """Class docstring first line, class name, or module name."""
    cls = getattr(item, "cls", None)
    if cls is not None:
        return _first_line(cls.__doc__) or cls.__name__
    return PurePath(item.location[0]).stem


# =============================================================================
# Attempt assembly
# =============================================================================

def _phase_failed(report: pytest.TestReport) -> bool:
    # pytest-rerunfailures reports the attempts it retries as "rerun"
    return report.failed or report.outcome == RERUN_OUTCOME


def attempt_status(reports: Dict[str, pytest.TestReport]) -> str:
    """
    Engine status of one attempt from its phase reports.

    Any failed phase makes the attempt ``failed`` (``timedOut`` when the
    failure comes from pytest-timeout); a passed call is ``passed``; the rest
    (skips, expected failures) is ``skipped``.
    """
    for when in PHASES:
        report = reports.get(when)
        if report is not None and _phase_failed(report):
            if TIMEOUT_MARKER in report.longreprtext:
                return TestStatus.TIMED_OUT.value
            return TestStatus.FAILED.value

    call = reports.get("call")
    if call is not None and call.passed:
        return TestStatus.PASSED.value
    return TestStatus.SKIPPED.value


def _errors(reports: Dict[str, pytest.TestReport]) -> List[str]:
    return [
        reports[when].longreprtext
        for when in PHASES
        if when in reports and _phase_failed(reports[when])
    ]


def _attachments(reports: Dict[str, pytest.TestReport]) -> List[Attachment]:
    # the last phase report carries every property added during the attempt
    last = next((reports[w] for w in reversed(PHASES) if w in reports), None)
    if last is None:
        return []
    return [
        Attachment.model_validate(value)
        for name, value in last.user_properties
        if name == ATTACHMENT_PROPERTY
    ]


def call_failed(item: pytest.Item) -> bool:
    """Whether setup or call of the current attempt failed (for fixture teardown)."""
    reports = item.stash.get(phase_report_key, {})
    return any(reports[w].failed for w in ("setup", "call") if w in reports)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    item.stash.setdefault(phase_report_key, {})[report.when] = report


# =============================================================================
# Reporter
# =============================================================================

class ConsoleReportPlugin:
    """
    Session-level reporter fed by pytest hooks.

    Attributes:
        report_path: Where the nested run report is written.
        recorder: Live spreadsheet recorder.
        writer: Nested run report writer.
    """

    def __init__(
        self,
        report_path: Path,
        recorder: RunRecorder,
        writer: Optional[RunReportWriter] = None,
    ) -> None:
        self.report_path = report_path
        self.recorder = recorder
        self.writer = writer or RunReportWriter()
        self._items: Dict[str, Tuple[str, str, str, str]] = {}
        self._phases: Dict[str, Dict[str, pytest.TestReport]] = {}
        self._attempt_counts: Dict[str, int] = {}

    @pytest.hookimpl(tryfirst=True)
    def pytest_runtest_protocol(self, item, nextitem):
        self._items[item.nodeid] = (
            item_title(item),
            item.location[0],
            suite_label(item),
            datetime.now(timezone.utc).isoformat(),
        )
        return None

    def pytest_runtest_logreport(self, report):
        phases = self._phases.setdefault(report.nodeid, {})
        phases[report.when] = report
        if report.when == "teardown":
            self._finish_attempt(report.nodeid)

    def _finish_attempt(self, nodeid: str) -> AttemptRecord:
        reports = self._phases.pop(nodeid, {})
        title, file_path, suite, started = self._items.get(
            nodeid, (nodeid, nodeid.split("::")[0], "", None)
        )
        retry = self._attempt_counts.get(nodeid, 0)
        self._attempt_counts[nodeid] = retry + 1

        attempt = AttemptRecord(
            title=title,
            file=file_path,
            suite=suite,
            status=attempt_status(reports),
            duration_ms=int(sum(r.duration for r in reports.values()) * 1000),
            errors=_errors(reports),
            attachments=_attachments(reports),
            retry=retry,
            start_time=started,
        )
        self.recorder.record(attempt)
        self.writer.add(attempt)
        logger.debug(f"Attempt finished: {attempt.key} -> {attempt.status}")
        return attempt

    @pytest.hookimpl(trylast=True)
    def pytest_sessionfinish(self, session, exitstatus):
        self.writer.write(self.report_path)
        asyncio.run(self.recorder.flush())

    def pytest_terminal_summary(self, terminalreporter):
        terminalreporter.write_sep("-", f"console run report: {self.report_path}")


# =============================================================================
# Registration
# =============================================================================

def pytest_addoption(parser):
    group = parser.getgroup("console-qa", "console run reporting")
    group.addoption(
        "--console-report",
        action="store_true",
        default=False,
        help="Record attempts for the spreadsheet and write the nested run report.",
    )
    group.addoption(
        "--console-report-path",
        default=None,
        help="Run report location (default: reports/run-report.json).",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "title(text): structured test title, e.g. 'TC_API_01 - Name'"
    )

    if not config.getoption("console_report"):
        return

    load_dotenv(Path.cwd() / ".env")
    qa_config = ConsoleQAConfig.from_env()
    report_path = config.getoption("console_report_path")

    reporter = ConsoleReportPlugin(
        report_path=Path(report_path) if report_path else qa_config.paths.report,
        recorder=RunRecorder(sink_url=qa_config.sheets_url),
    )
    config.pluginmanager.register(reporter, "console-qa-reporter")


def pytest_unconfigure(config):
    reporter = config.pluginmanager.get_plugin("console-qa-reporter")
    if reporter is not None:
        config.pluginmanager.unregister(reporter)
