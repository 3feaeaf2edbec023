"""
Fixtures for the console scenarios.

- ``console_config``: suite configuration from the environment / .env
- ``auth_state``: signs in once per session and saves the browser session;
  every scenario is skipped when TEST_EMAIL / TEST_PASSWORD are missing
- ``page``: a fresh authenticated page per test; on failure a full-page
  screenshot is taken and attached to the test for the run reporters
"""
from __future__ import annotations

import asyncio
import re
from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from playwright.async_api import Page

from console_qa.browser import BrowserManager, authenticate
from console_qa.config import ConsoleQAConfig
from console_qa.plugin import ATTACHMENT_PROPERTY, call_failed


@pytest.fixture(scope="session")
def console_config() -> ConsoleQAConfig:
    load_dotenv(Path.cwd() / ".env")
    return ConsoleQAConfig.from_env()


@pytest.fixture(scope="session")
def auth_state(console_config: ConsoleQAConfig) -> Path:
    """Sign in once and reuse the saved session for every scenario."""
    if not console_config.email or not console_config.password:
        pytest.skip("TEST_EMAIL and TEST_PASSWORD are required for console scenarios")
    return asyncio.run(authenticate(console_config))


def _screenshot_name(nodeid: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]+", "_", nodeid.split("::", 1)[-1]).strip("_")


@pytest_asyncio.fixture
async def page(request, console_config: ConsoleQAConfig, auth_state: Path) -> Page:
    manager = BrowserManager(console_config, storage_state=auth_state, screenshot_on_error=False)
    async with manager as browser_page:
        yield browser_page

        if call_failed(request.node):
            path = await manager.take_screenshot(_screenshot_name(request.node.nodeid))
            request.node.user_properties.append((
                ATTACHMENT_PROPERTY,
                {"name": "screenshot", "path": str(path), "contentType": "image/png"},
            ))
