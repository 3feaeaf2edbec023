from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


__all__ = [
    "DeliveryResult",
    "SheetRow",
    "SheetStatus",
]


class SheetStatus(str, Enum):
    """Spreadsheet status vocabulary (timeouts count as failures)."""
    PASS = "PASS"
    FAIL = "FAIL"
    SKIP = "SKIP"


class SheetRow(BaseModel):
    """
    One row pushed to the test-case spreadsheet.

    Attributes:
        testcase_id: Identifier parsed from the title (``TC_API_01``).
        test_name: Human test name.
        description: ``[<suite>] <name>``.
        update_date_time: Recording time, e.g. ``Feb 19, 2026 2:30 PM``.
        status: PASS, FAIL or SKIP.
        reason: Plain-language failure reason (empty unless FAIL).
        comment: Proof note (screenshot name, skip note, ...).
    """
    testcase_id: str = Field(alias="testcaseId")
    test_name: str = Field(alias="testName")
    description: str = Field(default="")
    update_date_time: str = Field(alias="updateDateTime")
    status: SheetStatus
    reason: str = Field(default="")
    comment: str = Field(default="")

    model_config = {"populate_by_name": True, "use_enum_values": True}


class DeliveryResult(BaseModel):
    """
    Outcome of pushing a report to an external sink.

    Attributes:
        success: Whether the sink acknowledged the payload.
        skipped: True when the sink is not configured.
        sink: Sink name (``sheets``, ``email``, ``dispatch``).
        message: Human-readable detail.
        status_code: Last HTTP status seen, if any.
        redirected: Whether a redirect hop was followed.
        sent_at: When delivery was attempted.
    """
    success: bool = Field(description="Whether delivery succeeded")
    skipped: bool = Field(default=False, description="Sink not configured")
    sink: str = Field(description="Sink name")
    message: Optional[str] = Field(default=None, description="Detail message")
    status_code: Optional[int] = Field(default=None, description="HTTP status")
    redirected: bool = Field(default=False, description="Redirect hop followed")
    sent_at: datetime = Field(default_factory=datetime.now, description="Attempt time")
