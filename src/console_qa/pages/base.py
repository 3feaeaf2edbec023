"""
Base page object shared by every console screen.

Holds the Playwright page plus the locators and helpers every screen has in
common: the user menu, logout, visibility and URL assertions, popups and
screenshots.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from playwright.async_api import Locator, Page, TimeoutError as PlaywrightTimeout, expect

from ..utils.test_data import ROUTES, USER_DISPLAY_NAME


__all__ = ["BasePage"]

logger = logging.getLogger(__name__)


DEFAULT_SCREENSHOT_DIR = Path("test-results") / "screenshots"
LOGOUT_TIMEOUT = 15000


class BasePage:
    """
    Common behaviour for console page objects.

    Attributes:
        page: Playwright page driven by this object.
        display_name: Name shown on the user menu button.
    """

    def __init__(self, page: Page, display_name: str = USER_DISPLAY_NAME) -> None:
        self.page = page
        self.display_name = display_name

        # ──────── User Menu ────────
        self.settings_menu_item = page.get_by_role("menuitem", name="Settings")
        self.logout_menu_item = page.get_by_role("menuitem", name="Log out")

    def user_menu_button(self, display_name: Optional[str] = None) -> Locator:
        return self.page.get_by_role("button", name=display_name or self.display_name)

    # ──────── Navigation ────────

    async def goto(self, path: str = "") -> None:
        await self.page.goto(path)

    async def wait_for_page_load(self) -> None:
        await self.page.wait_for_load_state("networkidle")

    async def open_from_dashboard(self, nav_link: Locator) -> None:
        """Open the dashboard, then follow a sidebar link."""
        await self.page.goto(ROUTES["dashboard"])
        await self.wait_for_page_load()
        await nav_link.click()
        await self.wait_for_page_load()

    async def open_popup(self, trigger: Locator) -> Page:
        """Click ``trigger`` and return the new tab it opens."""
        async with self.page.expect_popup() as popup_info:
            await trigger.click()
        return await popup_info.value

    # ──────── Element Helpers ────────

    async def click_element(self, locator: Locator) -> None:
        await locator.wait_for(state="visible")
        await locator.click()

    async def fill_input(self, locator: Locator, value: str) -> None:
        await locator.wait_for(state="visible")
        await locator.clear()
        await locator.fill(value)

    async def get_text(self, locator: Locator) -> str:
        await locator.wait_for(state="visible")
        return (await locator.text_content()) or ""

    async def is_visible(self, locator: Locator, timeout: Optional[float] = None) -> bool:
        """Visibility probe that never raises; waits up to ``timeout`` ms when given."""
        if timeout is None:
            return await locator.is_visible()
        try:
            await locator.wait_for(state="visible", timeout=timeout)
            return True
        except PlaywrightTimeout:
            return False

    # ──────── Logout ────────

    async def logout(self, display_name: Optional[str] = None) -> None:
        await self.user_menu_button(display_name).click()
        await self.logout_menu_item.click()
        await self.page.wait_for_url("**/auth/sign-in", timeout=LOGOUT_TIMEOUT)

    # ──────── Assertions ────────

    async def assert_visible(self, locator: Locator, timeout: Optional[float] = None) -> None:
        await expect(locator).to_be_visible(timeout=timeout)

    async def assert_text(self, locator: Locator, expected_text: str) -> None:
        await expect(locator).to_contain_text(expected_text)

    async def assert_url(self, expected_url: str) -> None:
        await expect(self.page).to_have_url(expected_url)

    async def assert_url_contains(self, url_part: str) -> None:
        await expect(self.page).to_have_url(re.compile(url_part))

    async def take_screenshot(self, name: str, screenshot_dir: Path = DEFAULT_SCREENSHOT_DIR) -> Path:
        screenshot_dir.mkdir(parents=True, exist_ok=True)
        path = screenshot_dir / f"{name}.png"
        await self.page.screenshot(path=str(path), full_page=True)
        logger.info(f"Screenshot saved: {path}")
        return path
