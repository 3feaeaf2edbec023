from __future__ import annotations

import re

from playwright.async_api import Page, expect

from ..utils.test_data import ROUTES
from .base import BasePage


__all__ = ["LoginPage"]


PASSWORD_STEP_TIMEOUT = 10000
DASHBOARD_REDIRECT_TIMEOUT = 30000


class LoginPage(BasePage):
    """Two-step sign-in form: email, Continue, password, Continue."""

    def __init__(self, page: Page) -> None:
        super().__init__(page)
        self.email_input = page.get_by_role("textbox", name="Email address")
        self.password_input = page.get_by_role("textbox", name="Password")
        self.continue_button = page.get_by_role("button", name="Continue")

    async def navigate_to_login(self) -> None:
        await self.page.goto(ROUTES["login"])
        await self.wait_for_page_load()

    async def enter_email(self, email: str) -> None:
        await self.email_input.click()
        await self.email_input.fill(email)

    async def enter_password(self, password: str) -> None:
        await self.password_input.fill(password)

    async def click_continue(self) -> None:
        await self.continue_button.click()

    async def login(self, email: str, password: str) -> None:
        await self.navigate_to_login()
        await self.enter_email(email)
        await self.click_continue()
        await self.password_input.wait_for(state="visible", timeout=PASSWORD_STEP_TIMEOUT)
        await self.enter_password(password)
        await self.click_continue()
        await self.page.wait_for_url("**/dashboard", timeout=DASHBOARD_REDIRECT_TIMEOUT)

    async def assert_login_page_visible(self) -> None:
        await expect(self.email_input).to_be_visible()

    async def assert_logged_in(self) -> None:
        await expect(self.page).not_to_have_url(re.compile("sign-in"))
