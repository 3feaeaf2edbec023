from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


__all__ = [
    "Attachment",
    "AttemptRecord",
    "OutcomeAttachment",
    "TestOutcome",
    "TestStatus",
]


class TestStatus(str, Enum):
    """Dashboard status vocabulary (timeouts kept apart from failures)."""
    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMED_OUT = "timedOut"


class Attachment(BaseModel):
    """
    File attached to a test attempt (screenshot, trace, video).

    Attributes:
        name: Attachment name, e.g. ``screenshot``.
        path: Path as reported by the test engine (may be absolute).
        content_type: MIME type.
    """
    name: str = Field(description="Attachment name")
    path: str = Field(default="", description="File path")
    content_type: str = Field(default="", alias="contentType", description="MIME type")

    model_config = {"populate_by_name": True}


class AttemptRecord(BaseModel):
    """
    One finished execution of a single test, as seen live during a run.

    Attributes:
        title: Structured test title (``TC_XXX_01 - Name``).
        file: Source file of the test.
        suite: Parent grouping label.
        status: Raw engine status (passed, failed, skipped, timedOut, ...).
        duration_ms: Attempt duration.
        errors: Error messages raised by the attempt.
        attachments: Files attached to the attempt.
        retry: Zero-based attempt index.
        start_time: ISO timestamp of the attempt start.
    """
    title: str = Field(description="Structured test title")
    file: str = Field(default="", description="Test source file")
    suite: str = Field(default="", description="Parent suite label")
    status: str = Field(description="Engine status")
    duration_ms: int = Field(default=0, ge=0, description="Duration (ms)")
    errors: List[str] = Field(default_factory=list, description="Error messages")
    attachments: List[Attachment] = Field(default_factory=list, description="Attachments")
    retry: int = Field(default=0, ge=0, description="Attempt index")
    start_time: Optional[str] = Field(default=None, description="Attempt start (ISO)")

    @property
    def key(self) -> str:
        return f"{self.file}::{self.title}"


class OutcomeAttachment(BaseModel):
    """Attachment as stored on the dashboard: base name only."""
    name: str = Field(description="Attachment name")
    relative_path: str = Field(default="", alias="relativePath", description="File base name")
    content_type: str = Field(default="", alias="contentType", description="MIME type")

    model_config = {"populate_by_name": True}


class TestOutcome(BaseModel):
    """
    Final result of one logical test (``file :: title``) in a run.

    ``attempt_number`` only serves de-duplication and is never serialized.
    """
    __test__ = False

    test_id: str = Field(alias="id", description="Testcase identifier")
    name: str = Field(description="Test name without the id prefix")
    title: str = Field(description="Full structured title")
    file: str = Field(default="", description="Test source file")
    module: str = Field(description="Module key")
    module_label: str = Field(alias="moduleLabel", description="Module display name")
    status: TestStatus = Field(description="Final status")
    duration_ms: int = Field(default=0, ge=0, alias="durationMs", description="Duration (ms)")
    error: str = Field(default="", description="Truncated failure message")
    attachments: List[OutcomeAttachment] = Field(default_factory=list)
    attempt_number: int = Field(default=0, ge=0, alias="retry", exclude=True)

    model_config = {"populate_by_name": True, "use_enum_values": True}

    @property
    def key(self) -> str:
        return f"{self.file}::{self.title}"
