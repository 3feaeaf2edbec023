"""
Nested run report writer.

Collects finished attempts during a pytest session and writes them in the
Playwright JSON-reporter layout consumed by the extractor:

    file suite -> suite per test class -> spec per title -> results per attempt
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Any, Dict, List, Optional

from ..models.outcome import AttemptRecord


__all__ = ["RunReportWriter"]

logger = logging.getLogger(__name__)


class RunReportWriter:
    """
    Accumulates attempts and renders the raw run report.

    Attributes:
        started_at: Session start time (``stats.startTime``).
    """

    def __init__(self, started_at: Optional[datetime] = None) -> None:
        self.started_at = started_at or datetime.now(timezone.utc)
        # file -> suite label -> title -> spec
        self._files: Dict[str, Dict[str, Dict[str, Dict[str, Any]]]] = {}
        self._attempt_count = 0

    def __len__(self) -> int:
        return self._attempt_count

    def add(self, attempt: AttemptRecord) -> None:
        """Append one finished attempt under its file, suite and title."""
        suites = self._files.setdefault(attempt.file, {})
        specs = suites.setdefault(attempt.suite, {})
        spec = specs.get(attempt.title)
        if spec is None:
            spec = {
                "title": attempt.title,
                "file": attempt.file,
                "ok": True,
                "tests": [{"results": []}],
            }
            specs[attempt.title] = spec

        spec["tests"][0]["results"].append(self._result(attempt))
        # the last attempt decides whether the spec is ok
        spec["ok"] = attempt.status in ("passed", "skipped")
        self._attempt_count += 1

    @staticmethod
    def _result(attempt: AttemptRecord) -> Dict[str, Any]:
        return {
            "status": attempt.status,
            "duration": attempt.duration_ms,
            "retry": attempt.retry,
            "startTime": attempt.start_time,
            "errors": [{"message": message} for message in attempt.errors],
            "attachments": [
                attachment.model_dump(by_alias=True)
                for attachment in attempt.attachments
            ],
        }

    def build(self, duration_ms: Optional[int] = None) -> Dict[str, Any]:
        """
        Render the report dictionary.

        Args:
            duration_ms: Wall-clock session duration; defaults to the time
                elapsed since ``started_at``.
        """
        if duration_ms is None:
            elapsed = datetime.now(timezone.utc) - self.started_at
            duration_ms = int(elapsed.total_seconds() * 1000)

        file_suites: List[Dict[str, Any]] = []
        for file_path, suites in self._files.items():
            file_suites.append({
                "title": PurePath(file_path).name,
                "file": file_path,
                "specs": [],
                "suites": [
                    {
                        "title": label,
                        "file": file_path,
                        "specs": list(specs.values()),
                        "suites": [],
                    }
                    for label, specs in suites.items()
                ],
            })

        return {
            "suites": file_suites,
            "stats": {
                "startTime": self.started_at.isoformat(),
                "duration": max(duration_ms, 0),
            },
        }

    def write(self, path: Path, duration_ms: Optional[int] = None) -> Path:
        """Write the report as JSON, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.build(duration_ms), indent=2), encoding="utf-8")
        logger.info(f"Run report written: {path} ({self._attempt_count} attempts)")
        return path
