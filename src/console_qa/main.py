"""
Console QA - command line interface.

Commands:
    run        Run the browser suite with live spreadsheet reporting
    dashboard  Aggregate the latest run report into dashboard data
    email      Send the HTML email summary of the latest run
    publish    Commit and push the dashboard data
    dispatch   Trigger the hosted workflow through a repository dispatch
    pipeline   run -> dashboard -> email (-> publish) in one go
    web        Serve the local dashboard
    version    Show version information

A ``.env`` file in the current directory is loaded before any command runs.
"""
from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from dotenv import load_dotenv

from .config import ConsoleQAConfig
from .pipeline import ReportPipeline
from .reporting.aggregator import DashboardAggregator, ReportNotFoundError
from .reporting.notifier import send_email_report
from .reporting.publisher import publish_artifacts, trigger_remote_run


logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _banner(title: str) -> None:
    click.echo()
    click.echo(click.style("=" * 50, fg="blue"))
    click.echo(click.style(f"  {title}", fg="blue", bold=True))
    click.echo(click.style("=" * 50, fg="blue"))
    click.echo()


def _report_delivery(result, label: str) -> None:
    if result.skipped:
        click.echo(click.style(f"[INFO] {label} skipped: {result.message}", fg="yellow"))
    elif result.success:
        click.echo(click.style(f"[OK] {label}: {result.message}", fg="green"))
    else:
        click.echo(click.style(f"[ERROR] {label} failed: {result.message}", fg="red"))


# =============================================================================
# CLI
# =============================================================================

@click.group()
@click.version_option(version="0.1.0", prog_name="console-qa")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """
    Console QA - end-to-end checks and reporting for the Shunyalabs console.

    Runs the browser suite, records every test in the spreadsheet, builds the
    static dashboard and mails a summary.
    """
    load_dotenv(Path.cwd() / ".env")
    _configure_logging(verbose)
    ctx.obj = ConsoleQAConfig.from_env()


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("pytest_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def run(config: ConsoleQAConfig, pytest_args: Tuple[str, ...]):
    """
    Run the console suite with reporting enabled.

    Extra arguments are handed to pytest.

    Example:

        $ python -m console_qa run

        $ python -m console_qa run -- -k billing --headed
    """
    _banner("CONSOLE QA - Test Run")
    pipeline = ReportPipeline(config)
    try:
        exit_code = asyncio.run(pipeline.run_tests(pytest_args))
    except KeyboardInterrupt:
        click.echo()
        click.echo(click.style("Interrupted by user", fg="yellow"))
        sys.exit(130)
    sys.exit(exit_code)


@cli.command()
@click.option(
    "--report",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Run report to aggregate (default: reports/run-report.json).",
)
@click.pass_obj
def dashboard(config: ConsoleQAConfig, report: Optional[Path]):
    """
    Generate dashboard data from the latest run report.

    Example:

        $ python -m console_qa dashboard
    """
    aggregator = DashboardAggregator(config.paths)
    try:
        result = aggregator.run(report)
    except ReportNotFoundError as e:
        click.echo(click.style(f"Report not found: {e.path}", fg="red"))
        click.echo("Run tests first: python -m console_qa run")
        sys.exit(1)

    snapshot = result.snapshot
    summary = snapshot.summary
    for path in result.written:
        click.echo(f"[OK] Written: {path}")
    click.echo()
    click.echo(
        f"Dashboard data generated: {summary.total} tests "
        f"({summary.passed} passed, {summary.failed} failed, "
        f"{snapshot.pass_rate}% pass rate)"
    )


@cli.command()
@click.pass_obj
def email(config: ConsoleQAConfig):
    """
    Send the email report for the latest dashboard data.

    Skipped when EMAIL_WEB_APP_URL or REPORT_RECIPIENTS is not set.
    """
    result = asyncio.run(send_email_report(config))
    if not result.skipped:
        _report_delivery(result, "Email report")


@cli.command()
@click.pass_obj
def publish(config: ConsoleQAConfig):
    """Commit and push docs/data, docs/history and docs/exports."""
    result = publish_artifacts(config.paths)
    _report_delivery(result, "Publish")


@cli.command()
@click.option(
    "--event-type",
    default="run-tests",
    show_default=True,
    help="Repository dispatch event name.",
)
@click.pass_obj
def dispatch(config: ConsoleQAConfig, event_type: str):
    """
    Trigger the hosted test workflow.

    Requires GITHUB_OWNER, GITHUB_REPO and GITHUB_PAT.
    """
    result = asyncio.run(trigger_remote_run(config, event_type=event_type))
    _report_delivery(result, "Dispatch")
    sys.exit(0 if result.success else 1)


@cli.command(context_settings={"ignore_unknown_options": True})
@click.option(
    "--publish/--no-publish",
    "publish_data",
    default=False,
    help="Commit and push the dashboard data at the end (default: no).",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Bound in seconds for the whole pipeline.",
)
@click.argument("pytest_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def pipeline(
    config: ConsoleQAConfig,
    publish_data: bool,
    timeout: Optional[float],
    pytest_args: Tuple[str, ...],
):
    """
    Run tests, build the dashboard and send the email report.

    The exit code is the test verdict; reporting failures only print.

    Example:

        $ python -m console_qa pipeline --publish --timeout 1800
    """
    _banner("CONSOLE QA - Scheduled Run")
    report_pipeline = ReportPipeline(config)
    try:
        result = asyncio.run(report_pipeline.run(
            publish=publish_data,
            timeout=timeout,
            extra_args=pytest_args,
        ))
    except KeyboardInterrupt:
        click.echo()
        click.echo(click.style("Interrupted by user", fg="yellow"))
        sys.exit(130)

    _banner("RESULTS")
    if result.aggregation:
        snapshot = result.aggregation.snapshot
        click.echo(f"[Tests] {snapshot.summary.total} total, {snapshot.summary.passed} passed")
        click.echo(f"[Rate] Pass rate: {snapshot.pass_rate}%")
    if result.email:
        _report_delivery(result.email, "Email report")
    if result.publish:
        _report_delivery(result.publish, "Publish")
    if result.timed_out:
        click.echo(click.style("[WARN] Pipeline timed out", fg="yellow"))
    click.echo(f"[Time] Duration: {result.duration_seconds:.1f}s")
    click.echo()

    sys.exit(result.exit_code)


@cli.command()
@click.option("--port", "-p", default=5000, type=int, help="Port to run on")
@click.option("--debug", is_flag=True, help="Enable debug mode")
@click.pass_obj
def web(config: ConsoleQAConfig, port: int, debug: bool):
    """
    Serve the dashboard locally.

    Example:

        $ python -m console_qa web --port 5000
    """
    from .web.app import create_app

    click.echo(click.style("\n" + "=" * 50, fg="cyan"))
    click.echo(click.style("  CONSOLE QA - Dashboard", fg="cyan", bold=True))
    click.echo(click.style("=" * 50, fg="cyan"))
    click.echo(f"\n  Open: http://localhost:{port}\n")

    app = create_app(config.paths)
    app.run(host="0.0.0.0", port=port, debug=debug, threaded=True)


@cli.command()
def version():
    """Show version information."""
    click.echo("Console QA v0.1.0")
    click.echo("End-to-end checks for the Shunyalabs console")
    click.echo()
    click.echo("Components:")
    click.echo("  - Page objects (Playwright)")
    click.echo("  - Run Recorder (Google Sheets)")
    click.echo("  - Dashboard Aggregator (docs/)")
    click.echo("  - Email Notifier")


def run_cli():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    run_cli()
