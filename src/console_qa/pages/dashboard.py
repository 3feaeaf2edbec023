from __future__ import annotations

from playwright.async_api import Locator, Page, expect

from ..utils.test_data import ROUTES
from .base import BasePage


__all__ = ["DashboardPage"]


class DashboardPage(BasePage):
    """
    Account dashboard: overview sections, sidebar and the external links
    that open in a new tab.
    """

    def __init__(self, page: Page, first_name: str = "Saira") -> None:
        super().__init__(page)

        # ──────── Heading ────────
        self.dashboard_heading = page.get_by_role("heading", name=f"{first_name}'s Dashboard")
        self.dashboard_subtitle = page.get_by_text("Overview of your account and")

        # ──────── Sections ────────
        self.api_keys_section = page.get_by_text("API KeysAPI KeysGenerate an API keyGenerate")
        self.your_plan_section = page.get_by_text(
            "Your PlanPay as you goUpgrade your plan to receive better ratesUpgrade"
        )
        self.explore_playground_heading = page.get_by_role("heading", name="Explore Playground")
        self.speech_to_text_link = page.get_by_role("link", name="Speech to Text")
        self.documentation_heading = page.get_by_role("heading", name="Documentation")
        self.transcribe_audio_link = page.get_by_role("link", name="Transcribe audio")
        self.see_features_link = page.get_by_role("link", name="See Features")
        self.usage_section_heading = page.get_by_role("heading", name="Usage")
        self.usage_overview_link = page.get_by_role("link", name="Usage Overview")

        # ──────── Sidebar ────────
        self.nav_dashboard = page.get_by_role("link", name="Dashboard").first
        self.nav_logs = page.get_by_role("link", name="Logs")
        self.nav_playground = page.get_by_role("link", name="Playground")
        self.nav_docs = page.get_by_role("link", name="Docs")

    # ──────── Popup headings (new tabs) ────────

    @staticmethod
    def playground_heading(popup: Page) -> Locator:
        return popup.get_by_role("heading", name="API Playground")

    @staticmethod
    def docs_quickstart_heading(popup: Page) -> Locator:
        return popup.get_by_role("heading", name="Quickstart")

    @staticmethod
    def speech_features_heading(popup: Page) -> Locator:
        return popup.get_by_role("heading", name="Speech Intelligence Features")

    @staticmethod
    def docs_welcome_heading(popup: Page) -> Locator:
        return popup.get_by_role("heading", name="Welcome to Shunya Labs")

    # ──────── Navigation ────────

    async def navigate_to_dashboard(self) -> None:
        await self.page.goto(ROUTES["dashboard"])
        await self.wait_for_page_load()

    async def click_nav_dashboard(self) -> None:
        await self.nav_dashboard.click()
        await self.wait_for_page_load()

    async def click_nav_logs(self) -> None:
        await self.nav_logs.click()
        await self.wait_for_page_load()

    async def click_usage_overview(self) -> None:
        await self.usage_overview_link.click()
        await self.wait_for_page_load()

    async def navigate_to_settings(self) -> None:
        await self.user_menu_button().click()
        await self.settings_menu_item.click()
        await self.wait_for_page_load()

    # ──────── Assertions ────────

    async def assert_dashboard_loaded(self) -> None:
        await expect(self.dashboard_heading).to_be_visible()
        await expect(self.dashboard_subtitle).to_be_visible()

    async def assert_sections_visible(self) -> None:
        for section in (
            self.api_keys_section,
            self.your_plan_section,
            self.explore_playground_heading,
            self.documentation_heading,
            self.usage_section_heading,
        ):
            await expect(section).to_be_visible()
