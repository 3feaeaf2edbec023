from __future__ import annotations

import logging
import re

from playwright.async_api import Page, expect

from ..utils.test_data import ROUTES
from .base import BasePage


__all__ = ["OnboardingPage"]

logger = logging.getLogger(__name__)


PRESENCE_TIMEOUT = 5000
PROBE_TIMEOUT = 2000
MAX_ONBOARDING_STEPS = 10


class OnboardingPage(BasePage):
    """
    First-run onboarding wizard.

    Accounts that already finished onboarding are redirected to the
    dashboard, so every flow first checks ``is_onboarding_present``.
    """

    def __init__(self, page: Page) -> None:
        super().__init__(page)
        self.onboarding_container = page.locator(
            '[data-testid="onboarding"], .onboarding, [class*="onboarding"]'
        )
        self.next_button = page.locator(
            'button:has-text("Next"), button:has-text("Continue"), button:has-text("Get Started")'
        )
        self.skip_button = page.locator('button:has-text("Skip"), a:has-text("Skip")')
        self.finish_button = page.locator(
            'button:has-text("Finish"), button:has-text("Done"), button:has-text("Complete")'
        )
        self.step_title = page.locator('h1, h2, [class*="step-title"], [class*="onboarding-title"]')
        self.workspace_name_input = page.locator(
            'input[name="name"], input[placeholder*="workspace"], input[placeholder*="organization"]'
        )

    async def open(self) -> None:
        """Go to onboarding unless the app already redirected there."""
        if "onboarding" not in self.page.url:
            await self.page.goto(ROUTES["onboarding"])
            await self.wait_for_page_load()

    async def is_onboarding_present(self) -> bool:
        return await self.is_visible(self.onboarding_container.first, timeout=PRESENCE_TIMEOUT)

    async def get_step_title(self) -> str:
        return await self.get_text(self.step_title.first)

    async def click_next(self) -> None:
        await self.click_element(self.next_button.first)
        await self.page.wait_for_timeout(500)

    async def skip_onboarding(self) -> bool:
        if not await self.is_visible(self.skip_button.first, timeout=PROBE_TIMEOUT):
            return False
        await self.click_element(self.skip_button.first)
        await self.page.wait_for_timeout(500)
        return True

    async def fill_workspace_name(self, name: str) -> None:
        await self.fill_input(self.workspace_name_input.first, name)

    async def complete_onboarding(self, workspace_name: str) -> None:
        """Fill the workspace name if asked, then step through to Finish."""
        if await self.is_visible(self.workspace_name_input.first, timeout=PROBE_TIMEOUT):
            await self.fill_workspace_name(workspace_name)

        for _ in range(MAX_ONBOARDING_STEPS):
            if await self.is_visible(self.finish_button.first, timeout=PROBE_TIMEOUT):
                await self.click_element(self.finish_button.first)
                await self.wait_for_page_load()
                return
            if not await self.is_visible(self.next_button.first, timeout=PROBE_TIMEOUT):
                return
            await self.click_next()
        logger.warning(f"Onboarding not finished after {MAX_ONBOARDING_STEPS} steps")

    async def assert_onboarding_visible(self) -> None:
        await expect(self.onboarding_container.first).to_be_visible()

    async def assert_onboarding_completed(self) -> None:
        await expect(self.page).not_to_have_url(re.compile("onboarding"))
