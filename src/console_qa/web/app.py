"""
Console QA Dashboard.

A Flask view over the files the Dashboard Aggregator writes: the latest run,
the bounded run history and the CSV exports.

Run with:
    python -m console_qa web --port 5000

Or with Flask:
    flask --app "console_qa.web.app:create_app" run --port 5000
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Optional

from flask import Flask, abort, jsonify, render_template_string, request, send_from_directory

from ..config import ArtifactPaths, ConsoleQAConfig
from ..reporting.history import RunHistory
from ..reporting.notifier import load_latest_snapshot, pass_rate_icon


__all__ = ["create_app"]

logger = logging.getLogger(__name__)


EXPORT_FILES = ("current-run.csv", "all-runs-summary.csv")


# =============================================================================
# HTML TEMPLATE
# =============================================================================

DASHBOARD_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Console QA Dashboard</title>
    <style>
        body { font-family: Arial, Helvetica, sans-serif; background: #f5f5f5; margin: 0; padding: 24px; color: #333; }
        .container { max-width: 1100px; margin: 0 auto; }
        header { background: linear-gradient(135deg, #8b5cf6 0%, #6d28d9 50%, #4c1d95 100%); color: #fff; border-radius: 12px; padding: 24px 32px; }
        header h1 { margin: 0 0 6px; }
        .cards { display: flex; gap: 12px; margin: 20px 0; }
        .card { flex: 1; background: #fff; border-radius: 10px; padding: 16px; text-align: center; border: 2px solid #e5e7eb; }
        .card .label { font-size: 11px; text-transform: uppercase; color: #666; font-weight: 600; }
        .card .value { font-size: 28px; font-weight: 700; margin-top: 6px; }
        table { width: 100%; border-collapse: collapse; background: #fff; border-radius: 8px; overflow: hidden; margin-bottom: 24px; }
        th, td { padding: 10px 14px; border-bottom: 1px solid #f0f0f0; text-align: left; font-size: 13px; }
        th { background: #f9fafb; color: #666; }
        .passed { color: #22c55e; font-weight: 600; }
        .failed, .timedOut { color: #ef4444; font-weight: 600; }
        .skipped { color: #999; font-weight: 600; }
        .error { color: #666; max-width: 380px; word-break: break-word; }
        .links a { margin-right: 16px; }
    </style>
</head>
<body>
<div class="container">
    <header>
        <h1>{{ status_icon }} Console QA Dashboard</h1>
        {% if snapshot %}
        <div>Latest Run: {{ started_at }} &middot; {{ (snapshot.duration_ms / 1000) | round(1) }}s</div>
        {% else %}
        <div>No runs yet. Run the suite and generate the dashboard first.</div>
        {% endif %}
    </header>

    {% if snapshot %}
    <div class="cards">
        <div class="card"><div class="label">Total Tests</div><div class="value">{{ snapshot.summary.total }}</div></div>
        <div class="card"><div class="label">Passed</div><div class="value passed">{{ snapshot.summary.passed }}</div></div>
        <div class="card"><div class="label">Failed</div><div class="value failed">{{ snapshot.summary.failed_including_timeouts }}</div></div>
        <div class="card"><div class="label">Skipped</div><div class="value skipped">{{ snapshot.summary.skipped }}</div></div>
        <div class="card"><div class="label">Pass Rate</div><div class="value">{{ snapshot.pass_rate }}%</div></div>
    </div>

    <h2>Results by Module</h2>
    <table>
        <thead><tr><th>Module</th><th>Total</th><th>Passed</th><th>Failed</th><th>Skipped</th><th>Timed Out</th></tr></thead>
        <tbody>
        {% for key, module in snapshot.modules.items() %}
            <tr>
                <td>{{ module.label }}</td>
                <td>{{ module.total }}</td>
                <td class="passed">{{ module.passed }}</td>
                <td class="failed">{{ module.failed }}</td>
                <td class="skipped">{{ module.skipped }}</td>
                <td class="timedOut">{{ module.timed_out }}</td>
            </tr>
        {% endfor %}
        </tbody>
    </table>

    <h2>Tests</h2>
    <table>
        <thead><tr><th>ID</th><th>Name</th><th>Module</th><th>Status</th><th>Duration (ms)</th><th>Error</th></tr></thead>
        <tbody>
        {% for test in snapshot.tests %}
            <tr>
                <td>{{ test.test_id }}</td>
                <td>{{ test.name }}</td>
                <td>{{ test.module_label }}</td>
                <td class="{{ test.status }}">{{ test.status }}</td>
                <td>{{ test.duration_ms }}</td>
                <td class="error">{{ test.error }}</td>
            </tr>
        {% endfor %}
        </tbody>
    </table>
    {% endif %}

    {% if history %}
    <h2>Run History</h2>
    <table>
        <thead><tr><th>Run ID</th><th>Started</th><th>Total</th><th>Passed</th><th>Failed</th><th>Pass Rate</th></tr></thead>
        <tbody>
        {% for entry in history %}
            <tr>
                <td>{{ entry.run_id[:8] }}</td>
                <td>{{ entry.started_at.strftime("%Y-%m-%d %H:%M") }}</td>
                <td>{{ entry.summary.total }}</td>
                <td class="passed">{{ entry.summary.passed }}</td>
                <td class="failed">{{ entry.summary.failed_including_timeouts }}</td>
                <td>{{ entry.pass_rate }}%</td>
            </tr>
        {% endfor %}
        </tbody>
    </table>
    {% endif %}

    <div class="links">
        {% for name in export_files %}<a href="/exports/{{ name }}">{{ name }}</a>{% endfor %}
    </div>
</div>
</body>
</html>
"""


def create_app(paths: Optional[ArtifactPaths] = None) -> Flask:
    """
    Create the dashboard application.

    Args:
        paths: Artifact locations (default: from the environment).

    Returns:
        Configured Flask app.
    """
    app = Flask(__name__)
    app.config["ARTIFACT_PATHS"] = paths or ConsoleQAConfig.from_env().paths

    def artifact_paths() -> ArtifactPaths:
        return app.config["ARTIFACT_PATHS"]

    # =========================================================================
    # ROUTES
    # =========================================================================

    @app.route("/")
    def index():
        """Render the latest run and the history."""
        snapshot = load_latest_snapshot(artifact_paths().latest)
        history = RunHistory.load(artifact_paths().history)

        started_at = ""
        if snapshot:
            local = snapshot.started_at.astimezone() if snapshot.started_at.tzinfo else snapshot.started_at
            started_at = local.strftime("%a, %b %d %Y %I:%M %p")

        return render_template_string(
            DASHBOARD_TEMPLATE,
            snapshot=snapshot,
            history=history.entries,
            started_at=started_at,
            status_icon=pass_rate_icon(snapshot.pass_rate) if snapshot else "",
            export_files=EXPORT_FILES,
        )

    @app.route("/api/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
            "has_data": artifact_paths().latest.exists(),
        })

    @app.route("/api/latest")
    def latest():
        """Latest snapshot exactly as written by the aggregator."""
        path = artifact_paths().latest
        if not path.exists():
            return jsonify({"error": "No dashboard data found"}), 404
        return jsonify(json.loads(path.read_text(encoding="utf-8")))

    @app.route("/api/history")
    def history():
        """History entries, newest first; ``?limit=N`` trims the list."""
        entries = RunHistory.load(artifact_paths().history).entries
        limit = request.args.get("limit", type=int)
        if limit is not None and limit >= 0:
            entries = entries[:limit]
        return jsonify([entry.to_json_dict() for entry in entries])

    @app.route("/exports/<filename>")
    def exports(filename: str):
        """Download one of the CSV exports."""
        if filename not in EXPORT_FILES:
            abort(404)
        exports_dir = artifact_paths().exports_dir
        if not (exports_dir / filename).exists():
            abort(404)
        return send_from_directory(exports_dir, filename, mimetype="text/csv", as_attachment=True)

    return app
