"""
Publish glue: commit the dashboard artifacts and trigger remote runs.

- ``publish_artifacts`` stages docs/data, docs/history and docs/exports,
  commits them with a timestamped message and pushes.
- ``trigger_remote_run`` sends a repository dispatch event so the hosted
  workflow runs the suite on schedule.

Neither function raises on a failed git or HTTP call; the outcome is
returned as a ``DeliveryResult``.
"""
from __future__ import annotations

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

import httpx

from ..config import ArtifactPaths, ConsoleQAConfig
from ..models.sheet_row import DeliveryResult
from .recorder import format_update_time


__all__ = [
    "GITHUB_API_URL",
    "publish_artifacts",
    "trigger_remote_run",
]

logger = logging.getLogger(__name__)


GITHUB_API_URL = "https://api.github.com"
DISPATCH_TIMEOUT = 30.0
GIT_TIMEOUT = 120.0


def _git(args: List[str], cwd: Path, timeout: float = GIT_TIMEOUT) -> subprocess.CompletedProcess:
    """Run git; a command that outlives ``timeout`` comes back as a failed process."""
    try:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.error(f"git {args[0]} timed out after {timeout:.0f}s")
        return subprocess.CompletedProcess(
            ["git", *args], returncode=124, stdout="",
            stderr=f"git {args[0]} timed out after {timeout:.0f}s",
        )


def publish_artifacts(
    paths: ArtifactPaths,
    clock: Callable[[], datetime] = datetime.now,
) -> DeliveryResult:
    """
    Commit and push the dashboard data.

    Args:
        paths: Artifact locations (the root is the git work tree).
        clock: Source of the commit timestamp.

    Returns:
        DeliveryResult; ``skipped`` when nothing changed.
    """
    root = paths.root
    relative_dirs = [str(d.relative_to(root)) for d in paths.published_dirs]

    added = _git(["add", *relative_dirs], root)
    if added.returncode != 0:
        logger.error(f"git add failed: {added.stderr.strip()}")
        return DeliveryResult(success=False, sink="git", message=added.stderr.strip() or "git add failed")

    diff = _git(["diff", "--cached", "--stat"], root)
    if not diff.stdout.strip():
        logger.info("No dashboard changes to commit")
        return DeliveryResult(success=True, skipped=True, sink="git", message="No dashboard changes to commit")

    message = f"Update dashboard data - {format_update_time(clock())}"
    committed = _git(["commit", "-m", message], root)
    if committed.returncode != 0:
        logger.error(f"git commit failed: {committed.stderr.strip()}")
        return DeliveryResult(success=False, sink="git", message=committed.stderr.strip() or "git commit failed")
    logger.info(f"Committed: {message}")

    pushed = _git(["push"], root)
    if pushed.returncode != 0:
        logger.error(f"Failed to push. You can push manually: git push ({pushed.stderr.strip()})")
        return DeliveryResult(success=False, sink="git", message=f"Committed but push failed: {pushed.stderr.strip()}")

    logger.info("Pushed dashboard data")
    return DeliveryResult(success=True, sink="git", message=message)


async def trigger_remote_run(
    config: ConsoleQAConfig,
    event_type: str = "run-tests",
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DeliveryResult:
    """
    Send a repository dispatch event to start the hosted test workflow.

    Args:
        config: Configuration with GITHUB_OWNER, GITHUB_REPO and GITHUB_PAT.
        event_type: Dispatch event name the workflow listens for.
        transport: Custom HTTP transport (tests).

    Returns:
        DeliveryResult; ``skipped`` when the dispatch target is not configured.
    """
    if not config.dispatch_enabled:
        logger.info("GITHUB_OWNER, GITHUB_REPO or GITHUB_PAT not set - skipping dispatch")
        return DeliveryResult(
            success=False,
            skipped=True,
            sink="dispatch",
            message="Missing GITHUB_OWNER, GITHUB_REPO, or GITHUB_PAT",
        )

    url = f"{GITHUB_API_URL}/repos/{config.github_owner}/{config.github_repo}/dispatches"
    headers = {
        "Authorization": f"token {config.github_token}",
        "Accept": "application/vnd.github+json",
    }

    try:
        async with httpx.AsyncClient(timeout=DISPATCH_TIMEOUT, transport=transport) as client:
            response = await client.post(url, json={"event_type": event_type}, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"GitHub dispatch failed: {e}")
        return DeliveryResult(success=False, sink="dispatch", message=str(e))

    if response.status_code >= 300:
        logger.error(f"GitHub dispatch failed: {response.status_code} {response.text}")
        return DeliveryResult(
            success=False,
            sink="dispatch",
            message=f"GitHub dispatch failed: {response.status_code} {response.text}",
            status_code=response.status_code,
        )

    logger.info(f"Dispatched '{event_type}' to {config.github_owner}/{config.github_repo}")
    return DeliveryResult(
        success=True,
        sink="dispatch",
        message=f"Dispatched '{event_type}'",
        status_code=response.status_code,
    )
