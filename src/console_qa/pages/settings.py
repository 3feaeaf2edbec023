from __future__ import annotations

from playwright.async_api import Locator, Page, expect

from .base import BasePage


__all__ = ["SettingsPage"]


TOAST_TIMEOUT = 10000


class SettingsPage(BasePage):
    """
    Profile settings.

    The user menu button is labelled with the current display name, which
    changes while the profile test runs, so it is always looked up by name.
    """

    def __init__(self, page: Page) -> None:
        super().__init__(page)
        self.nav_settings = page.get_by_role("link", name="Settings")
        self.nav_dashboard = page.get_by_role("link", name="Dashboard").first
        self.first_name_input = page.get_by_role("textbox", name="First name")
        self.last_name_input = page.get_by_role("textbox", name="Last name")
        self.save_changes_button = page.get_by_role("button", name="Save Changes")
        self.success_toast = page.get_by_text("Personal information updated")

    def dashboard_heading(self, first_name: str) -> Locator:
        return self.page.get_by_role("heading", name=f"{first_name}'s Dashboard")

    async def navigate_to_settings(self) -> None:
        await self.open_from_dashboard(self.nav_settings)

    async def navigate_to_settings_via_user_menu(self, display_name: str) -> None:
        await self.user_menu_button(display_name).click()
        await self.settings_menu_item.click()
        await self.wait_for_page_load()

    async def navigate_to_dashboard(self) -> None:
        await self.nav_dashboard.click()
        await self.wait_for_page_load()

    async def update_profile(self, first_name: str, last_name: str) -> None:
        await self.first_name_input.click()
        await self.first_name_input.fill(first_name)
        await self.last_name_input.click()
        await self.last_name_input.fill(last_name)
        await self.save_changes_button.click()

    async def assert_profile_form_visible(self) -> None:
        await expect(self.first_name_input).to_be_visible()
        await expect(self.last_name_input).to_be_visible()
        await expect(self.save_changes_button).to_be_visible()

    async def assert_success_toast_visible(self) -> None:
        await expect(self.success_toast).to_be_visible(timeout=TOAST_TIMEOUT)

    async def assert_dashboard_heading(self, first_name: str) -> None:
        await expect(self.dashboard_heading(first_name)).to_be_visible()
