"""
Browser launcher for the console scenarios.

BrowserManager owns one Chromium instance and one context per scenario:
- the context is rooted at BASE_URL, so pages navigate with console routes
- a saved session file (from ``authenticate``) starts the context signed in
- full-page screenshots land in ``test-results/screenshots``

Settings come from ConsoleQAConfig (BROWSER_HEADLESS, BROWSER_SLOW_MO,
BROWSER_TIMEOUT, BASE_URL); explicit constructor arguments win.

Example Usage:
    >>> async with BrowserManager(config, storage_state=config.paths.auth_state) as page:
    ...     await page.goto("/dashboard")
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from ..config import ConsoleQAConfig


if TYPE_CHECKING:
    from types import TracebackType


__all__ = ["BrowserManager"]

logger = logging.getLogger(__name__)


CHROMIUM_ARGS = ["--no-sandbox", "--disable-dev-shm-usage"]
VIEWPORT = {"width": 1280, "height": 720}
NAVIGATION_TIMEOUT = 30000


class BrowserManager:
    """
    Async context manager yielding a console page.

    Attributes:
        config: Suite configuration (base URL, timeouts, artifact paths).
        storage_state: Saved session file; ignored when it does not exist yet.
        headless: Run without a visible window.
        slow_mo: Delay between actions in milliseconds.
        screenshot_on_error: Capture the page when the ``async with`` body raises.
        timeout: Default action timeout in milliseconds.
    """

    def __init__(
        self,
        config: Optional[ConsoleQAConfig] = None,
        storage_state: Optional[Path] = None,
        headless: Optional[bool] = None,
        slow_mo: Optional[int] = None,
        screenshot_on_error: bool = True,
        timeout: Optional[int] = None,
    ) -> None:
        self.config = config or ConsoleQAConfig.from_env()
        self.storage_state = storage_state
        self.headless = self.config.headless if headless is None else headless
        self.slow_mo = self.config.slow_mo if slow_mo is None else slow_mo
        self.screenshot_on_error = screenshot_on_error
        self.timeout = timeout or self.config.browser_timeout

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def signed_in(self) -> bool:
        """Whether the context starts from a saved session."""
        return self.storage_state is not None and self.storage_state.exists()

    def context_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "base_url": self.config.base_url,
            "viewport": VIEWPORT,
            "locale": "en-US",
        }
        if self.signed_in:
            options["storage_state"] = str(self.storage_state)
        return options

    async def __aenter__(self) -> Page:
        logger.info(f"Launching Chromium for {self.config.base_url} (headless={self.headless})")

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                slow_mo=self.slow_mo,
                args=CHROMIUM_ARGS,
            )
            self._context = await self._browser.new_context(**self.context_options())
            self._context.set_default_timeout(self.timeout)
            self._context.set_default_navigation_timeout(NAVIGATION_TIMEOUT)
            self._page = await self._context.new_page()
        except Exception as e:
            logger.error(f"Failed to launch browser: {e}")
            await self.close()
            raise RuntimeError(f"Browser launch failed: {e}") from e

        logger.debug(f"Page ready (signed_in={self.signed_in})")
        return self._page

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> bool:
        if exc_type is not None and self.screenshot_on_error and self._page:
            logger.error(f"Browser session failed: {exc_val}")
            try:
                await self.take_screenshot("error")
            except Exception as e:
                logger.warning(f"Failed to save error screenshot: {e}")

        await self.close()
        return False

    async def close(self) -> None:
        """Close context, browser and driver; each step is attempted even if one fails."""
        steps = (
            ("context", self._context, "close"),
            ("browser", self._browser, "close"),
            ("playwright", self._playwright, "stop"),
        )
        for label, resource, method in steps:
            if resource is None:
                continue
            try:
                await getattr(resource, method)()
            except Exception as e:
                logger.warning(f"Error closing {label}: {e}")

        self._page = self._context = self._browser = self._playwright = None

    async def take_screenshot(self, name: str = "screenshot") -> Path:
        """Full-page screenshot named ``<name>_<timestamp>.png``."""
        if not self._page:
            raise RuntimeError("Page not initialized. Use within 'async with' block.")

        screenshot_dir = self.config.paths.screenshots
        screenshot_dir.mkdir(parents=True, exist_ok=True)
        path = screenshot_dir / f"{name}_{datetime.now():%Y%m%d_%H%M%S}.png"

        await self._page.screenshot(path=str(path), full_page=True)
        logger.info(f"Screenshot saved: {path}")
        return path

    @property
    def page(self) -> Optional[Page]:
        return self._page
