"""
Reporting pipeline for console test runs.

This package turns a finished run into its four reports:
- RunRecorder: Live per-test spreadsheet rows (spreadsheet sink)
- DashboardAggregator: latest.json, bounded history and CSV exports
- EmailNotifier: HTML summary email (mail relay sink)
- publish_artifacts / trigger_remote_run: git publish and scheduled dispatch
"""
from .aggregator import AggregationResult, DashboardAggregator, ReportNotFoundError
from .delivery import SinkDeliveryError
from .extractor import MODULE_LABELS, extract_outcomes
from .history import RunHistory
from .notifier import EmailNotifier, send_email_report
from .publisher import publish_artifacts, trigger_remote_run
from .recorder import RunRecorder
from .run_report import RunReportWriter

__all__ = [
    "AggregationResult",
    "DashboardAggregator",
    "EmailNotifier",
    "MODULE_LABELS",
    "ReportNotFoundError",
    "RunHistory",
    "RunRecorder",
    "RunReportWriter",
    "SinkDeliveryError",
    "extract_outcomes",
    "publish_artifacts",
    "send_email_report",
    "trigger_remote_run",
]
