"""
Test suite for the pytest reporting plugin.

Hooks are driven directly with hand-built ``TestReport`` objects and a small
stand-in item, so no nested pytest session is needed.

Run with: pytest tests/test_plugin.py -v
"""
from __future__ import annotations

import json
from types import SimpleNamespace
from typing import List, Optional

import pytest

from console_qa.plugin import (
    ATTACHMENT_PROPERTY,
    ConsoleReportPlugin,
    _errors,
    attempt_status,
    call_failed,
    item_title,
    phase_report_key,
    suite_label,
)
from console_qa.reporting.recorder import RunRecorder


FILE = "tests/e2e/test_billing.py"


class BillingTests:
    """Billing Page Tests

    Plans, pricing and payment history.
    """

    def test_plans(self):
        """Plans heading is visible."""


class FakeItem:
    """Just enough of ``pytest.Item`` for the plugin helpers."""

    def __init__(self, name: str, obj=None, cls=None, title: Optional[str] = None):
        self.name = name
        self.obj = obj
        self.cls = cls
        self.location = (FILE, 10, name)
        self.nodeid = f"{FILE}::{name}"
        self.stash = pytest.Stash()
        self._title = title

    def get_closest_marker(self, name: str):
        if name == "title" and self._title:
            return SimpleNamespace(args=(self._title,), kwargs={})
        return None


def _report(when: str, outcome: str = "passed", longrepr=None, nodeid: str = f"{FILE}::test_plans",
            duration: float = 0.5, user_properties: Optional[List] = None) -> pytest.TestReport:
    return pytest.TestReport(
        nodeid=nodeid,
        location=(FILE, 10, "test_plans"),
        keywords={},
        outcome=outcome,
        longrepr=longrepr,
        when=when,
        duration=duration,
        user_properties=user_properties or [],
    )


def _phases(call_outcome: str = "passed", call_longrepr=None, teardown_props=None):
    return {
        "setup": _report("setup"),
        "call": _report("call", call_outcome, call_longrepr),
        "teardown": _report("teardown", user_properties=teardown_props),
    }


class TestItemMetadata:
    """Titles and suite labels."""

    def test_title_marker_wins(self):
        item = FakeItem("test_plans", obj=BillingTests.test_plans, title="TC_BILL_02 - Plans heading")
        assert item_title(item) == "TC_BILL_02 - Plans heading"

    def test_docstring_title(self):
        item = FakeItem("test_plans", obj=BillingTests.test_plans)
        assert item_title(item) == "Plans heading is visible."

    def test_name_title(self):
        assert item_title(FakeItem("test_bare")) == "test_bare"

    def test_suite_from_class_docstring(self):
        assert suite_label(FakeItem("test_plans", cls=BillingTests)) == "Billing Page Tests"

    def test_suite_from_module(self):
        assert suite_label(FakeItem("test_plans")) == "test_billing"


class TestAttemptStatus:
    """Engine status from phase reports."""

    def test_passed(self):
        assert attempt_status(_phases()) == "passed"

    def test_failed_call(self):
        assert attempt_status(_phases("failed", "AssertionError: nope")) == "failed"

    def test_failed_setup(self):
        reports = {"setup": _report("setup", "failed", "fixture error"),
                   "teardown": _report("teardown")}
        assert attempt_status(reports) == "failed"

    def test_timeout(self):
        reports = _phases("failed", "E   Failed: Timeout >30.0s")
        assert attempt_status(reports) == "timedOut"

    def test_skipped(self):
        reports = {"setup": _report("setup", "skipped"), "teardown": _report("teardown")}
        assert attempt_status(reports) == "skipped"

    def test_rerun_attempt_is_failed(self):
        reports = _phases("rerun", "AssertionError: heading not visible")

        assert attempt_status(reports) == "failed"
        assert _errors(reports) == ["AssertionError: heading not visible"]

    def test_call_failed_reads_stash(self):
        item = FakeItem("test_plans")
        assert call_failed(item) is False

        item.stash[phase_report_key] = {"call": _report("call", "failed", "boom")}
        assert call_failed(item) is True


class TestConsoleReportPlugin:
    """Attempts flow into the recorder and the run report."""

    @pytest.fixture
    def plugin(self, tmp_path) -> ConsoleReportPlugin:
        return ConsoleReportPlugin(tmp_path / "reports" / "run-report.json", RunRecorder())

    def _feed(self, plugin: ConsoleReportPlugin, reports) -> None:
        for when in ("setup", "call", "teardown"):
            if when in reports:
                plugin.pytest_runtest_logreport(reports[when])

    def test_attempt_recorded(self, plugin: ConsoleReportPlugin):
        item = FakeItem("test_plans", obj=BillingTests.test_plans, cls=BillingTests,
                        title="TC_BILL_02 - Plans heading")
        plugin.pytest_runtest_protocol(item, None)

        screenshot = {"name": "screenshot", "path": "/tmp/shot.png", "contentType": "image/png"}
        self._feed(plugin, _phases("failed", "AssertionError: nope",
                                   teardown_props=[(ATTACHMENT_PROPERTY, screenshot)]))

        row = plugin.recorder.rows[0]
        assert row.testcase_id == "TC_BILL_02"
        assert row.status == "FAIL"
        assert row.description == "[Billing Page Tests] Plans heading"
        assert row.comment == "Screenshot: shot.png"
        assert len(plugin.writer) == 1

    def test_retry_numbers_increase(self, plugin: ConsoleReportPlugin):
        item = FakeItem("test_plans", title="TC_BILL_02 - Plans heading")

        plugin.pytest_runtest_protocol(item, None)
        self._feed(plugin, _phases("failed", "boom"))
        plugin.pytest_runtest_protocol(item, None)
        self._feed(plugin, _phases())

        spec = plugin.writer.build(0)["suites"][0]["suites"][0]["specs"][0]
        assert [r["retry"] for r in spec["tests"][0]["results"]] == [0, 1]
        assert len(plugin.recorder.rows) == 1
        assert plugin.recorder.rows[0].status == "PASS"

    def test_duration_sums_phases(self, plugin: ConsoleReportPlugin):
        plugin.pytest_runtest_protocol(FakeItem("test_plans"), None)
        self._feed(plugin, _phases())

        spec = plugin.writer.build(0)["suites"][0]["suites"][0]["specs"][0]
        assert spec["tests"][0]["results"][0]["duration"] == 1500

    def test_session_finish_writes_report_and_flushes(self, plugin: ConsoleReportPlugin, capsys):
        plugin.pytest_runtest_protocol(FakeItem("test_plans", title="TC_BILL_01 - Page"), None)
        self._feed(plugin, _phases())

        plugin.pytest_sessionfinish(session=None, exitstatus=0)

        report = json.loads(plugin.report_path.read_text(encoding="utf-8"))
        assert report["suites"][0]["file"] == FILE
        assert "Test Results Summary" in capsys.readouterr().out
