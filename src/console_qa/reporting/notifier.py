"""
Email Notifier - styled HTML summary of the latest run.

Reads docs/data/latest.json, renders a subject and a self-contained HTML body,
and posts ``{to, subject, body}`` to the mail relay web app.

Configuration via environment variables:
- EMAIL_WEB_APP_URL: Mail relay endpoint (doPost web app)
- REPORT_RECIPIENTS: Comma-separated email addresses
- DASHBOARD_URL: Link behind the "View Full Dashboard" button

Email is optional: a missing endpoint or recipient list skips the send, and a
failed send is logged without failing the pipeline.

Example Usage:
    >>> notifier = EmailNotifier(
    ...     endpoint=config.email_endpoint,
    ...     recipients=config.recipients,
    ... )
    >>> result = await notifier.send(snapshot)
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import click
import httpx
from jinja2 import Environment, select_autoescape
from pydantic import ValidationError

from ..config import ConsoleQAConfig, DEFAULT_DASHBOARD_URL
from ..models.run_snapshot import RunSnapshot
from ..models.sheet_row import DeliveryResult
from .aggregator import compute_pass_rate
from .delivery import SinkDeliveryError, post_with_redirect


__all__ = [
    "EmailNotifier",
    "load_latest_snapshot",
    "pass_rate_icon",
    "send_email_report",
]

logger = logging.getLogger(__name__)


PRODUCT_NAME = "Shunyalabs Console"
SHEETS_URL = "https://docs.google.com/spreadsheets"
MAX_FAILED_ERROR_LENGTH = 120


EMAIL_TEMPLATE = """<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"><meta name="viewport" content="width=device-width,initial-scale=1.0"></head>
<body style="margin:0;padding:0;background:#f5f5f5;font-family:Arial,Helvetica,sans-serif">
<table width="100%" cellpadding="0" cellspacing="0" style="background:#f5f5f5;padding:20px 0">
<tr><td align="center">
<table width="620" cellpadding="0" cellspacing="0" style="background:#fff;border-radius:12px;overflow:hidden;box-shadow:0 4px 20px rgba(0,0,0,.08)">

  <tr>
    <td style="background:linear-gradient(135deg,#8b5cf6 0%,#6d28d9 50%,#4c1d95 100%);padding:32px 40px;color:#fff">
      <p style="margin:0 0 4px;font-size:13px;opacity:.8">{{ status_icon }}</p>
      <h1 style="margin:0 0 6px;font-size:24px;font-weight:700">QC Automation Report</h1>
      <p style="margin:0 0 4px;font-size:14px;opacity:.9">{{ product }} Automation</p>
      <p style="margin:0;font-size:13px;opacity:.7">Latest Run: {{ run_date }}, {{ run_time }}</p>
    </td>
  </tr>

  <tr>
    <td style="padding:28px 40px 0">
      <table width="100%" cellpadding="0" cellspacing="0">
        <tr>
          {% for card in cards %}
          <td width="25%" style="padding:0 6px">
            <div style="border:2px solid {{ card.border }};border-radius:10px;padding:16px;text-align:center">
              <p style="margin:0;font-size:11px;color:#666;text-transform:uppercase;font-weight:600;letter-spacing:.5px">{{ card.label }}</p>
              {% if card.icon %}<p style="margin:2px 0 0;font-size:20px">{{ card.icon }}</p>{% endif %}
              <p style="margin:6px 0 0;font-size:28px;font-weight:700;color:{{ card.color }}">{{ card.value }}</p>
            </div>
          </td>
          {% endfor %}
        </tr>
      </table>
    </td>
  </tr>

  <tr>
    <td style="padding:24px 40px 0">
      <p style="font-size:14px;font-weight:600;color:#333;margin:0 0 10px">📋 Results by Module</p>
      <table style="width:100%;border-collapse:collapse;background:#fff;border-radius:8px;overflow:hidden;border:1px solid #e5e7eb">
        <thead>
          <tr style="background:#f9fafb">
            <th style="padding:10px 14px;text-align:left;font-size:12px;color:#666;font-weight:600">Module</th>
            <th style="padding:10px 14px;text-align:center;font-size:12px;color:#22c55e;font-weight:600">Pass</th>
            <th style="padding:10px 14px;text-align:center;font-size:12px;color:#ef4444;font-weight:600">Fail</th>
            <th style="padding:10px 14px;text-align:center;font-size:12px;color:#666;font-weight:600">Rate</th>
          </tr>
        </thead>
        <tbody>
        {% for module in modules %}
          <tr>
            <td style="padding:10px 14px;border-bottom:1px solid #f0f0f0;font-size:14px">{{ module.icon }} {{ module.label }}</td>
            <td style="padding:10px 14px;border-bottom:1px solid #f0f0f0;text-align:center;color:#22c55e;font-weight:600;font-size:14px">{{ module.passed }}</td>
            <td style="padding:10px 14px;border-bottom:1px solid #f0f0f0;text-align:center;color:#ef4444;font-weight:600;font-size:14px">{{ module.failed }}</td>
            <td style="padding:10px 14px;border-bottom:1px solid #f0f0f0;text-align:center;font-weight:600;font-size:14px">{{ module.rate }}%</td>
          </tr>
        {% endfor %}
        </tbody>
      </table>
    </td>
  </tr>

  {% if failed_tests %}
  <tr>
    <td style="padding:24px 40px 0">
      <p style="font-size:14px;font-weight:600;color:#333;margin-bottom:8px">🔴 Failed Tests</p>
      <table style="width:100%;border-collapse:collapse;background:#fff;border-radius:8px;overflow:hidden;border:1px solid #e5e7eb">
        <thead>
          <tr style="background:#fef2f2">
            <th style="padding:10px 14px;text-align:left;font-size:12px;color:#666;font-weight:600">Test Name</th>
            <th style="padding:10px 14px;text-align:left;font-size:12px;color:#666;font-weight:600">Module</th>
            <th style="padding:10px 14px;text-align:left;font-size:12px;color:#666;font-weight:600">Error</th>
          </tr>
        </thead>
        <tbody>
        {% for test in failed_tests %}
          <tr>
            <td style="padding:8px 14px;border-bottom:1px solid #f0f0f0;font-size:13px;color:#333">{{ test.title }}</td>
            <td style="padding:8px 14px;border-bottom:1px solid #f0f0f0;font-size:12px;color:#ef4444">{{ test.module }}</td>
            <td style="padding:8px 14px;border-bottom:1px solid #f0f0f0;font-size:12px;color:#666;max-width:250px;word-break:break-word">{{ test.error }}</td>
          </tr>
        {% endfor %}
        </tbody>
      </table>
    </td>
  </tr>
  {% endif %}

  <tr>
    <td style="padding:28px 40px;text-align:center">
      <a href="{{ dashboard_url }}" style="display:inline-block;padding:12px 28px;background:linear-gradient(135deg,#8b5cf6,#6d28d9);color:#fff;text-decoration:none;border-radius:8px;font-weight:600;font-size:14px;margin-right:12px">📊 View Full Dashboard</a>
      {% if sheets_url %}
      <a href="{{ sheets_url }}" style="display:inline-block;padding:12px 28px;background:linear-gradient(135deg,#f59e0b,#d97706);color:#fff;text-decoration:none;border-radius:8px;font-weight:600;font-size:14px">📋 View Test Cases</a>
      {% endif %}
    </td>
  </tr>

  <tr>
    <td style="padding:20px 40px;border-top:1px solid #e5e7eb;text-align:center">
      <p style="margin:0 0 4px;font-size:13px;color:#666">Thanks &amp; Regards,</p>
      <p style="margin:0 0 8px;font-size:14px;font-weight:600;color:#333">Automation BOT 🤖</p>
      <p style="margin:0;font-size:11px;color:#999">This is an automated report generated from the latest test run.</p>
    </td>
  </tr>

</table>
</td></tr>
</table>
</body>
</html>
"""

_environment = Environment(autoescape=select_autoescape(default=True, default_for_string=True))


def pass_rate_icon(rate: int) -> str:
    """✅ at 100%, 🟡 from 80%, 🔴 below."""
    if rate >= 100:
        return "✅"
    if rate >= 80:
        return "🟡"
    return "🔴"


def load_latest_snapshot(path: Path) -> Optional[RunSnapshot]:
    """Read the latest snapshot; None when it is missing or unreadable."""
    if not path.exists():
        return None
    try:
        return RunSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
    except (ValidationError, ValueError) as e:
        logger.error(f"Invalid dashboard data in {path}: {e}")
        return None


class EmailNotifier:
    """
    Renders and sends the email report.

    Attributes:
        endpoint: Mail relay web-app URL.
        recipients: Addresses receiving the report.
        dashboard_url: Public dashboard link.
        sheets_url: Spreadsheet link (None hides the button).
        product: Product name used in subject and header.
    """

    def __init__(
        self,
        endpoint: str,
        recipients: List[str],
        dashboard_url: str = DEFAULT_DASHBOARD_URL,
        sheets_url: Optional[str] = None,
        product: str = PRODUCT_NAME,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.recipients = recipients
        self.dashboard_url = dashboard_url
        self.sheets_url = sheets_url
        self.product = product
        self._transport = transport
        self._template = _environment.from_string(EMAIL_TEMPLATE)

    def build_subject(self, snapshot: RunSnapshot) -> str:
        started = self._local(snapshot.started_at)
        date_str = f"{started:%A}, {started:%b} {started.day}, {started.year}"
        return (
            f"QC {self.product} Automation Report – {date_str} – "
            f"{snapshot.pass_rate}% Pass Rate"
        )

    def build_body(self, snapshot: RunSnapshot) -> str:
        """Render the HTML body."""
        summary = snapshot.summary
        started = self._local(snapshot.started_at)
        fail_count = summary.failed_including_timeouts
        hour = started.hour % 12 or 12

        modules = []
        for module in snapshot.modules.values():
            rate = compute_pass_rate(module.passed, module.total)
            modules.append({
                "icon": pass_rate_icon(rate),
                "label": module.label,
                "passed": module.passed,
                "failed": module.failed_including_timeouts,
                "rate": rate,
            })

        failed_tests = []
        if fail_count > 0:
            failed_tests = [
                {
                    "title": test.title,
                    "module": test.module_label,
                    "error": (test.error or "Unknown error")[:MAX_FAILED_ERROR_LENGTH],
                }
                for test in snapshot.unsuccessful_tests
            ]

        cards = [
            {"label": "Total Tests", "value": summary.total, "border": "#e5e7eb", "color": "#333"},
            {"label": "Passed", "value": summary.passed, "border": "#bbf7d0", "color": "#22c55e"},
            {"label": "Failed", "value": fail_count, "border": "#fecaca", "color": "#ef4444"},
            {
                "label": "Pass Rate",
                "value": f"{snapshot.pass_rate}%",
                "border": "#e5e7eb",
                "color": "#333",
                "icon": pass_rate_icon(snapshot.pass_rate),
            },
        ]

        return self._template.render(
            status_icon=pass_rate_icon(snapshot.pass_rate),
            product=self.product,
            run_date=f"{started:%a}, {started:%b} {started:%d}, {started.year}",
            run_time=f"{hour:02d}:{started.minute:02d} {'am' if started.hour < 12 else 'pm'}",
            cards=cards,
            modules=modules,
            failed_tests=failed_tests,
            dashboard_url=self.dashboard_url,
            sheets_url=self.sheets_url,
        )

    async def send(self, snapshot: RunSnapshot) -> DeliveryResult:
        """
        Post the rendered report to the mail relay.

        Never raises: delivery problems come back as an unsuccessful result.
        """
        to = ",".join(self.recipients)
        payload = {
            "to": to,
            "subject": self.build_subject(snapshot),
            "body": self.build_body(snapshot),
        }
        logger.info(f"Sending email report to: {to}")

        try:
            response = await post_with_redirect(self.endpoint, payload, transport=self._transport)
            if not response.redirected:
                body = response.json_body()
                if not body.get("ok"):
                    raise SinkDeliveryError(
                        body.get("error") or "Unknown error",
                        response.status_code,
                    )
        except SinkDeliveryError as e:
            logger.error(f"Email send failed: {e}")
            return DeliveryResult(
                success=False,
                sink="email",
                message=str(e),
                status_code=e.status_code,
            )

        logger.info("Email report sent successfully")
        return DeliveryResult(
            success=True,
            sink="email",
            message=f"Sent to {len(self.recipients)} recipient(s)",
            status_code=response.status_code,
            redirected=response.redirected,
        )

    @staticmethod
    def _local(moment: datetime) -> datetime:
        return moment.astimezone() if moment.tzinfo else moment


async def send_email_report(
    config: ConsoleQAConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DeliveryResult:
    """
    Send the report for the latest snapshot if email is configured.

    Args:
        config: Suite configuration.
        transport: Custom HTTP transport (tests).

    Returns:
        DeliveryResult; ``skipped`` when email is not configured or there is
        no snapshot yet.
    """
    for setting, value in (
        ("EMAIL_WEB_APP_URL", config.email_endpoint),
        ("REPORT_RECIPIENTS", config.recipients),
    ):
        if not value:
            click.echo(click.style(f"[INFO] {setting} not set - skipping email report", fg="yellow"))
            click.echo(f"   Add {setting} to .env to enable email reports")
            return DeliveryResult(
                success=False,
                skipped=True,
                sink="email",
                message=f"{setting} not set",
            )

    snapshot = load_latest_snapshot(config.paths.latest)
    if snapshot is None:
        logger.error(f"No dashboard data found: {config.paths.latest}")
        click.echo(click.style(
            f"[ERROR] No dashboard data found: {config.paths.latest}. "
            "Run tests and generate dashboard first.",
            fg="red",
        ))
        return DeliveryResult(
            success=False,
            skipped=True,
            sink="email",
            message="Latest snapshot not found",
        )

    notifier = EmailNotifier(
        endpoint=config.email_endpoint,
        recipients=config.recipients,
        dashboard_url=config.dashboard_url,
        sheets_url=SHEETS_URL if config.sheets_url else None,
        transport=transport,
    )
    return await notifier.send(snapshot)
