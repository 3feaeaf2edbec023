from __future__ import annotations

from playwright.async_api import Page, expect

from .base import BasePage


__all__ = ["ContactUsPage"]


NOTIFICATION_TIMEOUT = 10000


class ContactUsPage(BasePage):
    """Contact form with a single required message field."""

    def __init__(self, page: Page) -> None:
        super().__init__(page)
        self.page_heading = page.get_by_role("heading", name="Contact Us")
        self.nav_contact_us = page.get_by_role("link", name="Contact Us")
        self.message_input = page.get_by_role("textbox", name="Message *")
        self.submit_button = page.get_by_role("button", name="Submit")
        self.success_notification = page.get_by_role(
            "region", name="Notifications alt+T"
        ).get_by_role("listitem")

    async def navigate_to_contact_us(self) -> None:
        await self.open_from_dashboard(self.nav_contact_us)

    async def submit_feedback(self, message: str) -> None:
        await self.message_input.click()
        await self.message_input.fill(message)
        await self.submit_button.click()

    async def assert_form_visible(self) -> None:
        await expect(self.page_heading).to_be_visible()
        await expect(self.message_input).to_be_visible()
        await expect(self.submit_button).to_be_visible()

    async def assert_success_notification_visible(self) -> None:
        await expect(self.success_notification).to_be_visible(timeout=NOTIFICATION_TIMEOUT)
