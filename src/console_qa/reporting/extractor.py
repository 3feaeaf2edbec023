"""
Report Extractor - flattens a nested run report into final test outcomes.

The report follows the Playwright JSON-reporter layout, which is also what
``RunReportWriter`` emits for pytest runs:

    {"suites": [{"specs": [{"title", "file", "tests": [{"results": [...]}]}],
                 "suites": [...]}],
     "stats": {"startTime", "duration"}}

Every attempt of every test is collected, then retries are collapsed so only
the highest-numbered attempt of each ``file::title`` survives.

Example Usage:
    >>> report = json.loads(Path("reports/run-report.json").read_text())
    >>> outcomes = extract_outcomes(report)
    >>> [(o.test_id, o.status) for o in outcomes]
    [('TC_API_01', 'passed'), ...]
"""
from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Optional

from ..models.outcome import OutcomeAttachment, TestOutcome
from .classifier import extractor_status, split_title


__all__ = [
    "MODULE_LABELS",
    "collect_attempts",
    "dedupe_outcomes",
    "extract_outcomes",
    "module_key",
    "module_label",
]

logger = logging.getLogger(__name__)


MODULE_LABELS: Dict[str, str] = {
    "api-keys": "API Keys",
    "billing": "Billing",
    "contact-us": "Contact Us",
    "dashboard": "Dashboard",
    "onboarding": "Onboarding",
    "settings": "Settings",
    "usage": "Usage",
    "z-logout": "Logout",
}

FILE_SUFFIXES = (".spec.ts", ".spec.js", ".test.ts", ".test.js", ".py")
AUTH_SETUP_MARKERS = ("auth.setup", "auth_setup")
MAX_ERROR_LENGTH = 500


def module_key(file_path: str) -> str:
    """
    Derive the module key from a test source file.

    ``tests/api-keys.spec.ts`` and ``tests/e2e/test_api_keys.py`` both map to
    ``api-keys``.
    """
    base = PurePath(file_path.replace("\\", "/")).name
    for suffix in FILE_SUFFIXES:
        if base.endswith(suffix):
            base = base[: -len(suffix)]
            break
    if base.startswith("test_"):
        base = base[len("test_"):]
    return base.replace("_", "-")


def module_label(key: str) -> str:
    """Display name for a module key, falling back to the key itself."""
    return MODULE_LABELS.get(key, key)


def is_auth_setup(file_path: str) -> bool:
    return any(marker in file_path for marker in AUTH_SETUP_MARKERS)


def _error_message(result: Dict[str, Any]) -> str:
    errors = result.get("errors") or []
    if not errors:
        return ""
    messages = [(error or {}).get("message") or "" for error in errors]
    return "\n".join(messages)[:MAX_ERROR_LENGTH]


def _attachments(result: Dict[str, Any]) -> List[OutcomeAttachment]:
    attachments = []
    for attachment in result.get("attachments") or []:
        path = attachment.get("path") or ""
        attachments.append(OutcomeAttachment(
            name=attachment.get("name", ""),
            relative_path=PurePath(path.replace("\\", "/")).name if path else "",
            content_type=attachment.get("contentType") or "",
        ))
    return attachments


def _outcome_from_result(spec: Dict[str, Any], result: Dict[str, Any]) -> TestOutcome:
    title = spec.get("title", "")
    file_path = spec.get("file") or ""
    key = module_key(file_path)
    test_id, name = split_title(title)
    return TestOutcome(
        test_id=test_id,
        name=name,
        title=title,
        file=file_path,
        module=key,
        module_label=module_label(key),
        status=extractor_status(result.get("status", "")),
        duration_ms=max(int(result.get("duration") or 0), 0),
        error=_error_message(result),
        attachments=_attachments(result),
        attempt_number=int(result.get("retry") or 0),
    )


def collect_attempts(
    suite: Dict[str, Any],
    attempts: Optional[List[TestOutcome]] = None,
) -> List[TestOutcome]:
    """
    Recursively collect one outcome per attempt from a suite tree.

    Args:
        suite: Report root or any nested suite.
        attempts: Accumulator used by the recursion.

    Returns:
        Every attempt found, in document order.
    """
    if attempts is None:
        attempts = []

    for spec in suite.get("specs") or []:
        if is_auth_setup(spec.get("file") or ""):
            continue
        for test in spec.get("tests") or []:
            for result in test.get("results") or []:
                attempts.append(_outcome_from_result(spec, result))

    for child in suite.get("suites") or []:
        collect_attempts(child, attempts)

    return attempts


def dedupe_outcomes(attempts: Iterable[TestOutcome]) -> List[TestOutcome]:
    """
    Keep only the highest-numbered attempt per ``file::title``.

    Output order is the first-seen order of each key.
    """
    latest: Dict[str, TestOutcome] = {}
    for attempt in attempts:
        existing = latest.get(attempt.key)
        if existing is None or attempt.attempt_number > existing.attempt_number:
            latest[attempt.key] = attempt
    return list(latest.values())


def extract_outcomes(report: Dict[str, Any]) -> List[TestOutcome]:
    """Flatten a raw run report into one final outcome per logical test."""
    attempts = collect_attempts(report)
    outcomes = dedupe_outcomes(attempts)
    logger.debug(f"Extracted {len(outcomes)} outcomes from {len(attempts)} attempts")
    return outcomes
