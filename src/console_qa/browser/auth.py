"""
Sign-in bootstrap.

Logs in once with the test account and saves the browser storage state so
every scenario starts already authenticated.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..config import ConsoleQAConfig
from ..pages.login import LoginPage
from .launcher import BrowserManager


__all__ = ["authenticate"]

logger = logging.getLogger(__name__)


async def authenticate(
    config: ConsoleQAConfig,
    state_path: Optional[Path] = None,
) -> Path:
    """
    Sign in and persist the session.

    Args:
        config: Suite configuration with TEST_EMAIL / TEST_PASSWORD.
        state_path: Where to save the storage state
            (default: ``.auth/user.json`` under the artifact root).

    Returns:
        Path of the saved storage state.

    Raises:
        ValueError: If credentials are not configured.
    """
    if not config.email or not config.password:
        raise ValueError("TEST_EMAIL and TEST_PASSWORD must be set to sign in")

    state_path = state_path or config.paths.auth_state
    state_path.parent.mkdir(parents=True, exist_ok=True)

    manager = BrowserManager(config)
    async with manager as page:
        login_page = LoginPage(page)
        await login_page.login(config.email, config.password)
        await login_page.assert_logged_in()
        await page.context.storage_state(path=str(state_path))

    logger.info(f"Authentication state saved to: {state_path}")
    return state_path
