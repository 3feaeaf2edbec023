"""
Run Recorder - live per-test rows for the test-case spreadsheet.

The recorder is fed one ``AttemptRecord`` per finished attempt while the suite
runs. At the end of the run it pushes every row to the spreadsheet web app in
one batch, or prints a console table when the web app is not configured or
does not acknowledge the push.

Example Usage:
    >>> recorder = RunRecorder(sink_url=config.sheets_url)
    >>> recorder.record(attempt)
    >>> result = await recorder.flush()
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import PurePath
from typing import Callable, Dict, List, Optional

import click
import httpx

from ..models.outcome import AttemptRecord
from ..models.sheet_row import DeliveryResult, SheetRow, SheetStatus
from .classifier import recorder_status, simplify_error, split_title
from .delivery import SinkDeliveryError, post_with_redirect


__all__ = ["AUTH_TEST_TITLE", "RunRecorder", "format_update_time"]

logger = logging.getLogger(__name__)


AUTH_TEST_TITLE = "authenticate"

STATUS_ICONS = {
    SheetStatus.PASS.value: "✅",
    SheetStatus.FAIL.value: "❌",
    SheetStatus.SKIP.value: "⏭️",
}


def format_update_time(moment: datetime) -> str:
    """Format like ``Feb 19, 2026 2:30 PM``."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment:%b} {moment.day}, {moment.year} {hour}:{moment.minute:02d} {meridiem}"


def _comment_for(status: SheetStatus, attempt: AttemptRecord) -> str:
    if status == SheetStatus.PASS:
        return "Test passed successfully"
    if status == SheetStatus.SKIP:
        return "Test was skipped"
    screenshot = next(
        (a for a in attempt.attachments if a.name == "screenshot" and a.path),
        None,
    )
    if screenshot:
        file_name = PurePath(screenshot.path.replace("\\", "/")).name
        return f"Screenshot: {file_name}"
    return "No screenshot captured"


class RunRecorder:
    """
    Accumulates one spreadsheet row per logical test during a run.

    Retries replace the earlier row for the same ``file::title``.

    Attributes:
        sink_url: Spreadsheet web-app endpoint (None prints locally).
    """

    def __init__(
        self,
        sink_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.sink_url = sink_url
        self._transport = transport
        self._clock = clock
        self._rows: Dict[str, SheetRow] = {}

    @property
    def rows(self) -> List[SheetRow]:
        return list(self._rows.values())

    def record(self, attempt: AttemptRecord) -> Optional[SheetRow]:
        """
        Record one finished attempt.

        Args:
            attempt: The attempt as reported by the test engine.

        Returns:
            The row stored for the attempt, or None for the sign-in bootstrap.
        """
        if attempt.title == AUTH_TEST_TITLE:
            return None

        testcase_id, test_name = split_title(attempt.title)
        status = recorder_status(attempt.status)

        reason = ""
        if status == SheetStatus.FAIL and attempt.errors:
            reason = simplify_error(attempt.errors[0] or "Unknown error")

        row = SheetRow(
            testcase_id=testcase_id,
            test_name=test_name,
            description=f"[{attempt.suite}] {test_name}",
            update_date_time=format_update_time(self._clock()),
            status=status,
            reason=reason,
            comment=_comment_for(status, attempt),
        )
        # pop first so a retry moves to the position of its latest attempt
        self._rows.pop(attempt.key, None)
        self._rows[attempt.key] = row
        return row

    async def push(self) -> DeliveryResult:
        """
        Send every row to the spreadsheet web app.

        Raises:
            SinkDeliveryError: If the web app does not acknowledge the batch.
        """
        if not self.sink_url:
            raise SinkDeliveryError("Spreadsheet URL is not configured")

        payload = {"results": [row.model_dump(by_alias=True) for row in self.rows]}
        response = await post_with_redirect(self.sink_url, payload, transport=self._transport)

        body = response.json_body()
        if body.get("status") != "success":
            raise SinkDeliveryError(
                body.get("message") or "Apps Script returned an error",
                response.status_code,
            )

        return DeliveryResult(
            success=True,
            sink="sheets",
            message=f"{len(payload['results'])} test results pushed",
            status_code=response.status_code,
            redirected=response.redirected,
        )

    async def flush(self) -> DeliveryResult:
        """
        End-of-run delivery with console fallback.

        Never raises: a failed push is logged and the table printed instead.
        """
        if not self.sink_url:
            click.echo()
            click.echo(click.style(
                "[WARN] GOOGLE_APPS_SCRIPT_URL not set - skipping Google Sheets update",
                fg="yellow",
            ))
            click.echo("   Deploy the Apps Script and add the URL to .env to enable reporting")
            self.print_console_table()
            return DeliveryResult(
                success=False,
                skipped=True,
                sink="sheets",
                message="GOOGLE_APPS_SCRIPT_URL not set",
            )

        try:
            result = await self.push()
        except SinkDeliveryError as e:
            logger.error(f"Failed to update Google Sheets: {e}")
            click.echo(click.style(f"[ERROR] Failed to update Google Sheets: {e}", fg="red"))
            self.print_console_table()
            return DeliveryResult(
                success=False,
                sink="sheets",
                message=str(e),
                status_code=e.status_code,
            )

        click.echo(click.style(f"[OK] Google Sheets updated - {result.message}", fg="green"))
        return result

    def print_console_table(self) -> None:
        """Print the padded results table and a count summary."""
        rows = self.rows
        rule = "─" * 90

        click.echo()
        click.echo("Test Results Summary:")
        click.echo(rule)
        click.echo("ID".ljust(14) + "Status".ljust(8) + "Test Name".ljust(60) + "Reason")
        click.echo(rule)
        for row in rows:
            icon = STATUS_ICONS.get(row.status, "")
            click.echo(
                row.testcase_id.ljust(14)
                + f"{icon} {row.status}".ljust(10)
                + row.test_name[:58].ljust(60)
                + (row.reason or "-")
            )
        click.echo(rule)

        passed = sum(1 for row in rows if row.status == SheetStatus.PASS)
        failed = sum(1 for row in rows if row.status == SheetStatus.FAIL)
        skipped = sum(1 for row in rows if row.status == SheetStatus.SKIP)
        click.echo(
            f"Total: {len(rows)} | ✅ {passed} passed | ❌ {failed} failed | ⏭️ {skipped} skipped"
        )
        click.echo()
