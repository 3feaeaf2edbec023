"""
Runtime configuration for the console test suite and its reporting pipeline.

Configuration is done via environment variables (a local ``.env`` file is
loaded by the CLI before this module reads anything):

- BASE_URL: Console under test (default: https://console.shunyalabs.ai)
- LOGIN_URL: Sign-in page (default: <BASE_URL>/auth/sign-in)
- TEST_EMAIL / TEST_PASSWORD: Credentials used by the sign-in bootstrap
- GOOGLE_APPS_SCRIPT_URL: Spreadsheet sink endpoint (optional)
- EMAIL_WEB_APP_URL: Mail relay endpoint (optional)
- REPORT_RECIPIENTS: Comma-separated email addresses (optional)
- DASHBOARD_URL: Public dashboard link used in the email
- CI: Running on a CI runner (default: False)
- BROWSER_HEADLESS / BROWSER_SLOW_MO / BROWSER_TIMEOUT: Browser settings
- GITHUB_OWNER / GITHUB_REPO / GITHUB_PAT: Remote scheduler dispatch target
- CONSOLE_QA_ROOT: Directory holding reports/ and docs/ (default: cwd)

Example Usage:
    >>> from console_qa.config import ConsoleQAConfig
    >>>
    >>> config = ConsoleQAConfig.from_env()
    >>> config.paths.latest
    PosixPath('.../docs/data/latest.json')
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field


__all__ = [
    "ArtifactPaths",
    "ConsoleQAConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_DASHBOARD_URL",
]


DEFAULT_BASE_URL = "https://console.shunyalabs.ai"
DEFAULT_DASHBOARD_URL = "https://saira-uwc.github.io/Shunyalabs_console/"
DEFAULT_BROWSER_TIMEOUT = 30000  # 30 seconds


def _get_bool_config(environ: Mapping[str, str], env_var: str, default: bool) -> bool:
    """Get boolean config from env var, or default."""
    env_value = environ.get(env_var, "").lower()
    if env_value in ("true", "1", "yes"):
        return True
    elif env_value in ("false", "0", "no"):
        return False
    return default


def _get_int_config(environ: Mapping[str, str], env_var: str, default: int) -> int:
    """Get integer config from env var, or default."""
    env_value = environ.get(env_var, "")
    if env_value.isdigit():
        return int(env_value)
    return default


def _get_str_config(environ: Mapping[str, str], env_var: str) -> Optional[str]:
    """Get a non-blank string from env var, or None."""
    value = environ.get(env_var, "").strip()
    return value or None


class ArtifactPaths(BaseModel):
    """
    Every file the pipeline reads or writes, relative to one root.

    Attributes:
        root: Project directory holding ``reports/`` and ``docs/``.
    """
    root: Path = Field(default_factory=Path.cwd, description="Artifact root directory")

    @property
    def report(self) -> Path:
        """Raw nested run report written by the test run."""
        return self.root / "reports" / "run-report.json"

    @property
    def latest(self) -> Path:
        return self.root / "docs" / "data" / "latest.json"

    @property
    def history(self) -> Path:
        return self.root / "docs" / "history" / "runs.json"

    @property
    def current_run_csv(self) -> Path:
        return self.root / "docs" / "exports" / "current-run.csv"

    @property
    def all_runs_csv(self) -> Path:
        return self.root / "docs" / "exports" / "all-runs-summary.csv"

    @property
    def exports_dir(self) -> Path:
        return self.root / "docs" / "exports"

    @property
    def auth_state(self) -> Path:
        """Saved browser session produced by the sign-in bootstrap."""
        return self.root / ".auth" / "user.json"

    @property
    def screenshots(self) -> Path:
        return self.root / "test-results" / "screenshots"

    @property
    def published_dirs(self) -> List[Path]:
        """Directories committed by the publish step."""
        return [self.latest.parent, self.history.parent, self.exports_dir]


class ConsoleQAConfig(BaseModel):
    """
    Suite and reporting configuration.

    Attributes:
        base_url: Console under test.
        login_url: Sign-in page URL.
        email: Test account email.
        password: Test account password.
        sheets_url: Spreadsheet sink endpoint (None disables the push).
        email_endpoint: Mail relay endpoint (None disables email).
        recipients: Email report recipients.
        dashboard_url: Public dashboard link shown in the email.
        ci: Whether the suite runs on CI.
        headless: Run the browser without a window.
        slow_mo: Delay between browser actions in ms.
        browser_timeout: Default action timeout in ms.
        github_owner: Owner of the repository hosting the scheduler workflow.
        github_repo: Repository hosting the scheduler workflow.
        github_token: Token allowed to send repository dispatch events.
        paths: Artifact locations.
    """
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Console base URL")
    login_url: str = Field(
        default=f"{DEFAULT_BASE_URL}/auth/sign-in",
        description="Sign-in page URL",
    )
    email: Optional[str] = Field(default=None, description="Test account email")
    password: Optional[str] = Field(default=None, description="Test account password")
    sheets_url: Optional[str] = Field(default=None, description="Spreadsheet sink URL")
    email_endpoint: Optional[str] = Field(default=None, description="Mail relay URL")
    recipients: List[str] = Field(default_factory=list, description="Report recipients")
    dashboard_url: str = Field(default=DEFAULT_DASHBOARD_URL, description="Dashboard link")
    ci: bool = Field(default=False, description="Running on CI")
    headless: bool = Field(default=True, description="Headless browser")
    slow_mo: int = Field(default=0, ge=0, description="Delay between actions (ms)")
    browser_timeout: int = Field(
        default=DEFAULT_BROWSER_TIMEOUT,
        gt=0,
        description="Default browser timeout (ms)",
    )
    github_owner: Optional[str] = Field(default=None, description="Dispatch repo owner")
    github_repo: Optional[str] = Field(default=None, description="Dispatch repo name")
    github_token: Optional[str] = Field(default=None, description="Dispatch token")
    paths: ArtifactPaths = Field(default_factory=ArtifactPaths, description="Artifact paths")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConsoleQAConfig":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``).

        Returns:
            Populated ConsoleQAConfig.
        """
        env = os.environ if environ is None else environ

        base_url = (_get_str_config(env, "BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        recipients = [
            address.strip()
            for address in env.get("REPORT_RECIPIENTS", "").split(",")
            if address.strip()
        ]
        root = _get_str_config(env, "CONSOLE_QA_ROOT")

        return cls(
            base_url=base_url,
            login_url=_get_str_config(env, "LOGIN_URL") or f"{base_url}/auth/sign-in",
            email=_get_str_config(env, "TEST_EMAIL"),
            password=_get_str_config(env, "TEST_PASSWORD"),
            sheets_url=_get_str_config(env, "GOOGLE_APPS_SCRIPT_URL"),
            email_endpoint=_get_str_config(env, "EMAIL_WEB_APP_URL"),
            recipients=recipients,
            dashboard_url=_get_str_config(env, "DASHBOARD_URL") or DEFAULT_DASHBOARD_URL,
            ci=_get_bool_config(env, "CI", default=False),
            headless=_get_bool_config(env, "BROWSER_HEADLESS", default=True),
            slow_mo=_get_int_config(env, "BROWSER_SLOW_MO", default=0),
            browser_timeout=_get_int_config(
                env, "BROWSER_TIMEOUT", default=DEFAULT_BROWSER_TIMEOUT
            ),
            github_owner=_get_str_config(env, "GITHUB_OWNER"),
            github_repo=_get_str_config(env, "GITHUB_REPO"),
            github_token=_get_str_config(env, "GITHUB_PAT"),
            paths=ArtifactPaths(root=Path(root)) if root else ArtifactPaths(),
        )

    @property
    def email_enabled(self) -> bool:
        return bool(self.email_endpoint and self.recipients)

    @property
    def dispatch_enabled(self) -> bool:
        return bool(self.github_owner and self.github_repo and self.github_token)
