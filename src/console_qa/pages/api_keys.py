"""
API Keys screen: create a key, acknowledge the one-time reveal dialog,
then deactivate (revoke) it and find it under the Deactivated tab.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from playwright.async_api import Locator, Page, expect

from .base import BasePage


__all__ = ["ApiKeysPage", "current_date_pattern"]


DIALOG_TIMEOUT = 10000
RELOAD_TIMEOUT = 15000


def current_date_pattern(today: Optional[datetime] = None) -> str:
    """Date prefix the key table shows for today, e.g. ``Feb 19,``."""
    today = today or datetime.now()
    return f"{today:%b} {today.day},"


class ApiKeysPage(BasePage):

    def __init__(self, page: Page) -> None:
        super().__init__(page)

        # ──────── Page Header ────────
        self.page_heading = page.get_by_role("heading", name="API Keys")
        self.nav_api_keys = page.get_by_role("link", name="API Keys")

        # ──────── Create Key Flow ────────
        self.create_key_button = page.get_by_role("button", name="Create a new API key")
        self.key_name_input = page.get_by_role("textbox", name="Key Name *")
        self.create_api_key_button = page.get_by_role("button", name="Create API Key")

        # ──────── New Key Dialog ────────
        self.new_key_heading = page.get_by_role("heading", name="Your New API Key")
        self.acknowledge_switch = page.get_by_role("switch", name="I know I can't see this API")
        self.copy_api_key_button = page.get_by_role("button", name="Copy API key")
        self.got_it_button = page.get_by_role("button", name="Got it")

        # ──────── Deactivation Flow ────────
        self.deactivate_dialog = page.get_by_role("alertdialog", name="Deactivate API Key?")
        self.deactivate_button = page.get_by_role("button", name="Deactivate")
        self.deactivated_toast = page.get_by_text("API key deactivated")
        self.revoked_success_toast = page.get_by_text("API key revoked successfully")

        # ──────── Tabs ────────
        self.deactivated_tab = page.get_by_role("tab", name="Deactivated")
        self.api_keys_tab = page.get_by_role("tab", name="API Keys")
        self.deactivated_on_column = page.get_by_text("Deactivated on")

    def revoke_button(self, key_name: str) -> Locator:
        return self.page.get_by_role("button", name=f"Revoke API key {key_name}")

    def key_name_in_list(self, key_name: str) -> Locator:
        return self.page.get_by_text(key_name, exact=True)

    def today_date_text(self) -> Locator:
        return self.page.get_by_text(current_date_pattern()).first

    # ──────── Actions ────────

    async def navigate_to_api_keys(self) -> None:
        await self.open_from_dashboard(self.nav_api_keys)

    async def acknowledge_and_copy_key(self) -> None:
        await expect(self.new_key_heading).to_be_visible(timeout=DIALOG_TIMEOUT)
        await self.acknowledge_switch.click()
        await self.copy_api_key_button.click()
        await self.got_it_button.click()

    async def create_api_key(self, key_name: str) -> None:
        await self.create_key_button.click()
        await self.key_name_input.fill(key_name)
        await self.create_api_key_button.click()
        await self.acknowledge_and_copy_key()

    async def revoke_key(self, key_name: str) -> None:
        await self.revoke_button(key_name).click()
        await expect(self.deactivate_dialog).to_be_visible()
        await self.deactivate_button.click()
        # the list reloads after deactivation
        await self.page_heading.wait_for(state="visible", timeout=RELOAD_TIMEOUT)
        await self.page.wait_for_load_state("networkidle")
        await expect(self.api_keys_tab).to_be_visible(timeout=DIALOG_TIMEOUT)

    # ──────── Assertions ────────

    async def assert_page_loaded(self) -> None:
        await expect(self.page_heading).to_be_visible()
        await expect(self.create_key_button).to_be_visible()

    async def assert_key_in_active_list(self, key_name: str) -> None:
        await expect(self.key_name_in_list(key_name)).to_be_visible()

    async def assert_created_date_visible(self) -> None:
        await expect(self.today_date_text()).to_be_visible()

    async def assert_deactivation_toasts(self) -> None:
        await expect(self.deactivated_toast).to_be_visible(timeout=DIALOG_TIMEOUT)
        await expect(self.revoked_success_toast).to_be_visible(timeout=DIALOG_TIMEOUT)

    async def assert_key_in_deactivated_tab(self, key_name: str) -> None:
        await self.page.reload(wait_until="networkidle")
        await expect(self.deactivated_tab).to_be_visible(timeout=DIALOG_TIMEOUT)
        await self.deactivated_tab.click()
        await expect(self.deactivated_on_column).to_be_visible(timeout=RELOAD_TIMEOUT)
        await expect(self.key_name_in_list(key_name)).to_be_visible(timeout=RELOAD_TIMEOUT)
        await expect(self.today_date_text()).to_be_visible()
