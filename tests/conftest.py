"""
Pytest configuration and fixtures for console_qa tests.

This module provides reusable test fixtures including:
- Raw run reports in the nested reporter layout (passing, failing, retried)
- Artifact paths rooted in a temporary directory
- Attempt records as the pytest plugin produces them

Browser scenarios live in tests/e2e and only run with ``-m e2e`` or
RUN_E2E_TESTS=true.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List

import pytest

from console_qa.config import ArtifactPaths, ConsoleQAConfig
from console_qa.models.outcome import Attachment, AttemptRecord


# =============================================================================
# REPORT BUILDERS
# =============================================================================

def make_result(
    status: str = "passed",
    duration: int = 1000,
    retry: int = 0,
    error: str = "",
    attachments: List[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """One attempt entry of a spec."""
    return {
        "status": status,
        "duration": duration,
        "retry": retry,
        "errors": [{"message": error}] if error else [],
        "attachments": attachments or [],
    }


def make_spec(title: str, file: str, *results: Dict[str, Any]) -> Dict[str, Any]:
    """A spec with one test holding the given attempts."""
    return {
        "title": title,
        "file": file,
        "tests": [{"results": list(results) or [make_result()]}],
    }


def make_report(*specs: Dict[str, Any], start_time: str = "2026-02-19T09:30:00.000Z",
                duration: int = 60000) -> Dict[str, Any]:
    """Report with every spec nested one suite level deep, grouped by file."""
    by_file: Dict[str, List[Dict[str, Any]]] = {}
    for spec in specs:
        by_file.setdefault(spec["file"], []).append(spec)

    return {
        "suites": [
            {
                "title": file,
                "file": file,
                "specs": [],
                "suites": [{"title": "Suite", "file": file, "specs": file_specs, "suites": []}],
            }
            for file, file_specs in by_file.items()
        ],
        "stats": {"startTime": start_time, "duration": duration},
    }


# =============================================================================
# REPORT FIXTURES
# =============================================================================

@pytest.fixture
def mixed_report() -> Dict[str, Any]:
    """
    Three tests: one passed, one failed, one skipped.

    Expected dashboard: total 3, pass rate 33.
    """
    return make_report(
        make_spec("TC_API_01 - Verify API Keys page loads", "api-keys.spec.ts",
                  make_result("passed", 1200)),
        make_spec("TC_BILL_02 - Verify plans heading", "billing.spec.ts",
                  make_result("failed", 3000, error="Timeout 30000ms exceeded.\nCall log: ...")),
        make_spec("TC_SET_03 - Verify profile update", "settings.spec.ts",
                  make_result("skipped", 0)),
    )


@pytest.fixture
def retried_report() -> Dict[str, Any]:
    """One test that failed once and passed on retry."""
    return make_report(
        make_spec(
            "TC_DASH_01 - Verify dashboard heading",
            "dashboard.spec.ts",
            make_result("failed", 5000, retry=0, error="expect(locator).toBeVisible() failed"),
            make_result("passed", 2000, retry=1),
        ),
    )


@pytest.fixture
def report_file(tmp_path: Path, mixed_report: Dict[str, Any]) -> Path:
    """The mixed report written where the aggregator expects it."""
    path = tmp_path / "reports" / "run-report.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(mixed_report), encoding="utf-8")
    return path


# =============================================================================
# CONFIG FIXTURES
# =============================================================================

@pytest.fixture
def artifact_paths(tmp_path: Path) -> ArtifactPaths:
    """Artifact paths rooted in the test's temporary directory."""
    return ArtifactPaths(root=tmp_path)


@pytest.fixture
def qa_config(artifact_paths: ArtifactPaths) -> ConsoleQAConfig:
    """Configuration with every external sink disabled."""
    return ConsoleQAConfig(paths=artifact_paths)


@pytest.fixture
def failed_attempt() -> AttemptRecord:
    """A failed attempt carrying a screenshot."""
    return AttemptRecord(
        title="TC_API_02 - Verify API key creation",
        file="tests/e2e/test_api_keys.py",
        suite="API Keys Page Tests",
        status="failed",
        duration_ms=4200,
        errors=["Timed out 5000ms waiting for expect(locator).toBeVisible()\nLocator: get_by_text('auto_key')"],
        attachments=[
            Attachment(name="screenshot", path="/tmp/results/test-failed-1.png", content_type="image/png"),
        ],
    )


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (may require network)"
    )
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end test (requires console credentials)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration and e2e tests unless explicitly requested."""
    marker_option = config.getoption("-m", default="")

    run_integration = (
        "integration" in marker_option or
        os.environ.get("RUN_INTEGRATION_TESTS", "").lower() == "true"
    )

    run_e2e = (
        "e2e" in marker_option or
        os.environ.get("RUN_E2E_TESTS", "").lower() == "true"
    )

    skip_integration = pytest.mark.skip(
        reason="Integration tests skipped by default. Use -m integration or set RUN_INTEGRATION_TESTS=true"
    )
    skip_e2e = pytest.mark.skip(
        reason="E2E tests skipped by default. Use -m e2e or set RUN_E2E_TESTS=true"
    )

    for item in items:
        if "integration" in item.keywords and not run_integration:
            item.add_marker(skip_integration)
        if "e2e" in item.keywords and not run_e2e:
            item.add_marker(skip_e2e)
