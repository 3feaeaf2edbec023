from __future__ import annotations

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field

from .outcome import TestOutcome


__all__ = [
    "ModuleSummary",
    "RunHistoryEntry",
    "RunSnapshot",
    "RunSummary",
]


class RunSummary(BaseModel):
    """
    Status counters for a set of tests.

    ``total`` always equals ``passed + failed + skipped + timed_out``.
    """
    total: int = Field(default=0, ge=0)
    passed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    timed_out: int = Field(default=0, ge=0, alias="timedOut")

    model_config = {"populate_by_name": True}

    @property
    def failed_including_timeouts(self) -> int:
        """Failures merged with timeouts, as shown in the email report."""
        return self.failed + self.timed_out

    @property
    def is_consistent(self) -> bool:
        return self.total == self.passed + self.failed + self.skipped + self.timed_out


class ModuleSummary(RunSummary):
    """Counters for one module plus its display label."""
    label: str = Field(description="Module display name")


class RunHistoryEntry(BaseModel):
    """
    Summary-only record of a run, kept in the bounded history.

    Attributes:
        run_id: Opaque unique run identifier.
        started_at: When the run started.
        duration_ms: Total run duration.
        summary: Grand totals.
        pass_rate: Integer pass percentage.
        modules: Per-module counters in first-seen order.
    """
    run_id: str = Field(alias="id", description="Run identifier")
    started_at: datetime = Field(alias="startedAt", description="Run start time")
    duration_ms: int = Field(default=0, ge=0, alias="durationMs", description="Duration (ms)")
    summary: RunSummary = Field(default_factory=RunSummary)
    pass_rate: int = Field(default=0, ge=0, le=100, alias="passRate")
    modules: Dict[str, ModuleSummary] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class RunSnapshot(RunHistoryEntry):
    """Full result of the latest run, including every test outcome."""
    tests: List[TestOutcome] = Field(default_factory=list)

    def to_history_entry(self) -> RunHistoryEntry:
        """Drop the per-test detail for long-term retention."""
        return RunHistoryEntry.model_validate(self.model_dump(exclude={"tests"}))

    @property
    def unsuccessful_tests(self) -> List[TestOutcome]:
        """Every outcome whose status is not ``passed``."""
        return [test for test in self.tests if test.status != "passed"]
