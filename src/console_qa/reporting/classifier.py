"""
Title parsing, status mapping and failure-reason classification.

The two status mappers are intentionally separate: the spreadsheet only knows
PASS/FAIL/SKIP while the dashboard keeps timeouts in their own bucket.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ..models.outcome import TestStatus
from ..models.sheet_row import SheetStatus


__all__ = [
    "TITLE_PATTERN",
    "recorder_status",
    "extractor_status",
    "simplify_error",
    "split_title",
]


# "TC_DASH_01 - Verify dashboard heading..." -> ("TC_DASH_01", "Verify dashboard heading...")
TITLE_PATTERN = re.compile(r"^(TC_\w+_\d+)\s*-\s*(.+)$")

ANSI_ESCAPE_PATTERN = re.compile(r"\x1b?\[\d+(?:;\d+)*m")
LOCATOR_PATTERN = re.compile(r"Locator: (.+)")

MAX_REASON_LENGTH = 150

# (required substrings, any-of substrings, reason), first match wins
FAILURE_REASON_RULES: List[Tuple[Tuple[str, ...], Tuple[str, ...], str]] = [
    (("toHaveURL",), (), "Page did not navigate to the expected URL"),
    (("Timeout",), (), "Page or element took too long to load (timeout)"),
    ((), ("toContainText", "toHaveText"), "Text content on the page did not match expected value"),
    (("toBeEnabled",), (), "A button or input was disabled when it should have been enabled"),
    ((), ("net::ERR", "Navigation"), "Network error — page failed to load"),
]


def split_title(title: str, default_id: Optional[str] = None) -> Tuple[str, str]:
    """
    Split a structured title into testcase id and name.

    Args:
        title: Title like ``TC_API_01 - Verify API Keys page loads``.
        default_id: Id to use when the title has no id prefix
            (default: the whole title).

    Returns:
        (testcase_id, name) tuple.
    """
    match = TITLE_PATTERN.match(title)
    if match:
        return match.group(1), match.group(2).strip()
    return (title if default_id is None else default_id), title


def recorder_status(engine_status: str) -> SheetStatus:
    """Map an engine status onto the spreadsheet vocabulary."""
    if engine_status == "passed":
        return SheetStatus.PASS
    if engine_status == "skipped":
        return SheetStatus.SKIP
    return SheetStatus.FAIL


def extractor_status(engine_status: str) -> TestStatus:
    """Map an engine status onto the dashboard vocabulary."""
    if engine_status == "passed":
        return TestStatus.PASSED
    if engine_status == "timedOut":
        return TestStatus.TIMED_OUT
    if engine_status == "skipped":
        return TestStatus.SKIPPED
    return TestStatus.FAILED


def simplify_error(raw_error: str) -> str:
    """
    Turn a raw assertion error into a plain-language reason.

    Args:
        raw_error: Error text produced by the test engine.

    Returns:
        Mapped reason, or the cleaned first line capped at 150 characters.
    """
    if "toBeVisible" in raw_error and "not found" in raw_error:
        locator_match = LOCATOR_PATTERN.search(raw_error)
        element = locator_match.group(1).strip() if locator_match else "an element"
        return f"Expected element was not visible on the page: {element}"

    for required, any_of, reason in FAILURE_REASON_RULES:
        if required and not all(token in raw_error for token in required):
            continue
        if any_of and not any(token in raw_error for token in any_of):
            continue
        return reason

    first_line = ANSI_ESCAPE_PATTERN.sub("", raw_error.split("\n")[0]).strip()
    if len(first_line) > MAX_REASON_LENGTH:
        return first_line[:MAX_REASON_LENGTH] + "..."
    return first_line
