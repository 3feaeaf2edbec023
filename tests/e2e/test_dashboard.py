"""
Dashboard scenarios: sections, popup links, in-app navigation and logout.

Run with: pytest tests/e2e/test_dashboard.py -m e2e -v
"""
from __future__ import annotations

import re

import pytest
import pytest_asyncio
from playwright.async_api import Page, expect

from console_qa.pages import DashboardPage, LoginPage


pytestmark = pytest.mark.e2e

POPUP_TIMEOUT = 15000


@pytest_asyncio.fixture
async def dashboard(page: Page) -> DashboardPage:
    dashboard_page = DashboardPage(page)
    await dashboard_page.navigate_to_dashboard()
    return dashboard_page


class TestDashboard:
    """Dashboard Module - Navigation & Section Verification"""

    # ──────── Dashboard Load ────────

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_01 - Verify dashboard heading and subtitle are visible")
    async def test_heading_and_subtitle(self, dashboard: DashboardPage):
        await dashboard.assert_dashboard_loaded()

    # ──────── Dashboard Sections ────────

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_02 - Verify API Keys section is displayed on dashboard")
    async def test_api_keys_section(self, dashboard: DashboardPage):
        await expect(dashboard.api_keys_section).to_be_visible()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_03 - Verify Your Plan section is displayed on dashboard")
    async def test_your_plan_section(self, dashboard: DashboardPage):
        await expect(dashboard.your_plan_section).to_be_visible()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_04 - Verify Explore Playground section is visible")
    async def test_explore_playground_section(self, dashboard: DashboardPage):
        await expect(dashboard.explore_playground_heading).to_be_visible()
        await expect(dashboard.speech_to_text_link).to_be_visible()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_05 - Verify Documentation section is visible")
    async def test_documentation_section(self, dashboard: DashboardPage):
        await expect(dashboard.documentation_heading).to_be_visible()
        await expect(dashboard.transcribe_audio_link).to_be_visible()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_06 - Verify Usage section is visible")
    async def test_usage_section(self, dashboard: DashboardPage):
        await expect(dashboard.usage_section_heading).to_be_visible()
        await expect(dashboard.usage_overview_link).to_be_visible()

    # ──────── Popup Links ────────

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_07 - Verify Speech to Text link opens API Playground in new tab")
    async def test_speech_to_text_popup(self, dashboard: DashboardPage):
        popup = await dashboard.open_popup(dashboard.speech_to_text_link)
        await expect(dashboard.playground_heading(popup)).to_be_visible(timeout=POPUP_TIMEOUT)
        await popup.close()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_08 - Verify Transcribe audio link opens Docs Quickstart in new tab")
    async def test_transcribe_audio_popup(self, dashboard: DashboardPage):
        popup = await dashboard.open_popup(dashboard.transcribe_audio_link)
        await expect(dashboard.docs_quickstart_heading(popup)).to_be_visible(timeout=POPUP_TIMEOUT)
        await popup.close()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_09 - Verify See Features link opens Speech Intelligence Features in new tab")
    async def test_see_features_popup(self, dashboard: DashboardPage):
        popup = await dashboard.open_popup(dashboard.see_features_link)
        await expect(dashboard.speech_features_heading(popup)).to_be_visible(timeout=POPUP_TIMEOUT)
        await popup.close()

    # ──────── In-App Navigation ────────

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_10 - Verify Usage Overview link navigates to Usage Analytics page")
    async def test_usage_overview_link(self, page: Page, dashboard: DashboardPage):
        await dashboard.click_usage_overview()
        await expect(page.get_by_role("heading", name="Usage Analytics")).to_be_visible()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_11 - Verify Dashboard link navigates back from Usage")
    async def test_back_to_dashboard(self, dashboard: DashboardPage):
        await dashboard.click_usage_overview()
        await dashboard.click_nav_dashboard()
        await dashboard.assert_dashboard_loaded()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_12 - Verify Logs link navigates to Usage Logs page")
    async def test_logs_link(self, page: Page, dashboard: DashboardPage):
        await dashboard.click_nav_logs()
        await expect(page.get_by_role("heading", name="Usage Logs")).to_be_visible()

    # ──────── Nav Bar Popup Links ────────

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_13 - Verify Playground nav link opens API Playground in new tab")
    async def test_nav_playground_popup(self, dashboard: DashboardPage):
        popup = await dashboard.open_popup(dashboard.nav_playground)
        await expect(dashboard.playground_heading(popup)).to_be_visible(timeout=POPUP_TIMEOUT)
        await popup.close()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_14 - Verify Docs nav link opens Shunya Labs Docs in new tab")
    async def test_nav_docs_popup(self, dashboard: DashboardPage):
        popup = await dashboard.open_popup(dashboard.nav_docs)
        await expect(dashboard.docs_welcome_heading(popup)).to_be_visible(timeout=POPUP_TIMEOUT)
        await popup.close()

    # ──────── User Menu -> Settings ────────

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_15 - Verify user menu opens and navigates to Settings")
    async def test_user_menu_settings(self, page: Page, dashboard: DashboardPage):
        await dashboard.navigate_to_settings()
        await expect(page.get_by_role("heading", name="Profile")).to_be_visible()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_16 - Verify Settings page shows Personal Information section")
    async def test_personal_information_section(self, page: Page, dashboard: DashboardPage):
        await dashboard.navigate_to_settings()
        await expect(page.get_by_text(
            "Personal InformationYour basic account detailsFirst nameLast nameEmailSave"
        )).to_be_visible()

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_17 - Verify Settings page shows Current Plan section")
    async def test_current_plan_section(self, page: Page, dashboard: DashboardPage):
        await dashboard.navigate_to_settings()
        await expect(page.get_by_text(
            "Current PlanYour subscription and billing detailsPay as you goView plans"
        )).to_be_visible()

    # ──────── Logout ────────

    @pytest.mark.asyncio
    @pytest.mark.title("TC_DASH_18 - Verify user can log out and is redirected to sign-in")
    async def test_logout(self, page: Page, dashboard: DashboardPage):
        await dashboard.logout()
        await expect(page).to_have_url(re.compile(r"auth/sign-in"))
        await LoginPage(page).assert_login_page_visible()
