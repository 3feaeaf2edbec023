"""
Report Pipeline - one complete scheduled run.

Stages:
1. Run: the browser suite under pytest with the reporting plugin enabled
   (live spreadsheet rows + nested run report)
2. Dashboard: aggregate the run report into latest.json, history and CSVs
3. Email: send the HTML summary (optional)
4. Publish: commit and push the dashboard data (optional)

The exit code is the verdict of the test run alone. Reporting stages log
their failures and carry on. A run-level timeout cancels whatever stage is
in progress; files already written stay in place.

Example Usage:
    >>> pipeline = ReportPipeline(ConsoleQAConfig.from_env())
    >>> result = await pipeline.run(publish=True, timeout=1800)
    >>> sys.exit(result.exit_code)
"""
from __future__ import annotations

import asyncio
import logging
import sys
import time
from typing import Callable, List, Optional, Sequence

import click
from pydantic import BaseModel, Field

from .config import ConsoleQAConfig
from .models.sheet_row import DeliveryResult
from .reporting.aggregator import AggregationResult, DashboardAggregator, ReportNotFoundError
from .reporting.notifier import send_email_report
from .reporting.publisher import publish_artifacts


__all__ = ["PipelineResult", "ProgressIndicator", "ReportPipeline"]

logger = logging.getLogger(__name__)


TIMEOUT_EXIT_CODE = 124


# =============================================================================
# PROGRESS INDICATORS
# =============================================================================

class ProgressIndicator:
    """Helper class for stage progress messages."""

    ICONS = {
        "run": "[Run]",
        "dashboard": "[Dashboard]",
        "email": "[Email]",
        "publish": "[Publish]",
        "success": "[OK]",
        "error": "[ERROR]",
        "warning": "[WARN]",
        "info": "[INFO]",
    }

    def __init__(self, verbose: bool = True, callback: Optional[Callable] = None):
        self.verbose = verbose
        self.callback = callback

    def update(self, stage: str, message: str) -> None:
        """
        Report progress for a stage.

        Args:
            stage: Stage identifier (run, dashboard, email, publish, ...)
            message: Progress message.
        """
        icon = self.ICONS.get(stage, "•")
        if self.verbose:
            click.echo(f"{icon} {message}")
        if self.callback:
            self.callback(stage, message)
        logger.info(message)

    def success(self, message: str) -> None:
        self.update("success", message)

    def error(self, message: str) -> None:
        self.update("error", message)

    def warning(self, message: str) -> None:
        self.update("warning", message)


# =============================================================================
# RESULT
# =============================================================================

class PipelineResult(BaseModel):
    """
    What one pipeline run produced.

    Attributes:
        exit_code: Test-run verdict (pytest exit code, or 124 if the run
            itself was cut off by the timeout).
        timed_out: Whether the run-level timeout fired.
        aggregation: Dashboard files written, if aggregation ran.
        email: Email delivery outcome, if attempted.
        publish: Publish outcome, if attempted.
        duration_seconds: Wall-clock duration.
    """
    exit_code: Optional[int] = Field(default=None, description="Test verdict")
    timed_out: bool = Field(default=False)
    aggregation: Optional[AggregationResult] = None
    email: Optional[DeliveryResult] = None
    publish: Optional[DeliveryResult] = None
    duration_seconds: float = Field(default=0.0, ge=0)


# =============================================================================
# PIPELINE
# =============================================================================

class ReportPipeline:
    """
    Runs the suite and every reporting stage in order.

    Attributes:
        config: Suite configuration.
        progress: Stage progress reporter.
    """

    def __init__(
        self,
        config: ConsoleQAConfig,
        verbose: bool = True,
        progress_callback: Optional[Callable] = None,
    ) -> None:
        self.config = config
        self.progress = ProgressIndicator(verbose, progress_callback)

    def pytest_command(self, extra_args: Sequence[str] = ()) -> List[str]:
        paths = self.config.paths
        return [
            sys.executable, "-m", "pytest",
            str(paths.root / "tests" / "e2e"),
            "-m", "e2e",
            "--console-report",
            "--console-report-path", str(paths.report),
            *extra_args,
        ]

    async def run_tests(self, extra_args: Sequence[str] = ()) -> int:
        """
        Run the browser suite in a pytest subprocess.

        Returns:
            The pytest exit code.
        """
        command = self.pytest_command(extra_args)
        self.progress.update("run", f"Running console suite: {' '.join(command[1:])}")

        process = await asyncio.create_subprocess_exec(*command, cwd=str(self.config.paths.root))
        try:
            exit_code = await process.wait()
        except asyncio.CancelledError:
            self.progress.warning("Stopping test run")
            process.kill()
            await process.wait()
            raise

        if exit_code == 0:
            self.progress.success("All tests passed")
        else:
            self.progress.warning(f"Test run finished with exit code {exit_code}")
        return exit_code

    def build_dashboard(self) -> Optional[AggregationResult]:
        """Aggregate the latest run report; None if there is no report."""
        self.progress.update("dashboard", "Generating dashboard data...")
        try:
            result = DashboardAggregator(self.config.paths).run()
        except ReportNotFoundError as e:
            self.progress.error(str(e))
            return None

        snapshot = result.snapshot
        self.progress.success(
            f"Dashboard updated: {snapshot.summary.total} tests, {snapshot.pass_rate}% pass rate"
        )
        return result

    async def send_email(self) -> DeliveryResult:
        self.progress.update("email", "Sending email report...")
        return await send_email_report(self.config)

    def publish(self) -> DeliveryResult:
        self.progress.update("publish", "Publishing dashboard data...")
        result = publish_artifacts(self.config.paths)
        if result.success:
            self.progress.success(result.message or "Published")
        else:
            self.progress.warning(f"Publish failed: {result.message}")
        return result

    async def _stages(
        self,
        result: PipelineResult,
        publish: bool,
        extra_args: Sequence[str],
    ) -> None:
        result.exit_code = await self.run_tests(extra_args)
        result.aggregation = self.build_dashboard()
        if result.aggregation is None:
            return
        result.email = await self.send_email()
        if publish:
            # git runs in a worker thread so the run-level timeout can still fire
            result.publish = await asyncio.to_thread(self.publish)

    async def run(
        self,
        publish: bool = False,
        timeout: Optional[float] = None,
        extra_args: Sequence[str] = (),
    ) -> PipelineResult:
        """
        Run every stage under an optional run-level timeout.

        Args:
            publish: Commit and push the dashboard data at the end.
            timeout: Bound in seconds for the whole pipeline.
            extra_args: Extra pytest arguments.

        Returns:
            PipelineResult; completed stages are recorded even on timeout.
        """
        started = time.monotonic()
        result = PipelineResult()

        try:
            await asyncio.wait_for(self._stages(result, publish, extra_args), timeout=timeout)
        except asyncio.TimeoutError:
            result.timed_out = True
            self.progress.error(f"Pipeline timed out after {timeout}s; partial outputs kept")

        if result.exit_code is None:
            result.exit_code = TIMEOUT_EXIT_CODE
        result.duration_seconds = time.monotonic() - started
        return result
