"""Runs last (module name sorts after the others) so the shared session stays valid."""
from __future__ import annotations

import re

import pytest
from playwright.async_api import Page, expect

from console_qa.pages import DashboardPage


pytestmark = pytest.mark.e2e


class TestLogout:
    """Logout - Session Cleanup"""

    @pytest.mark.asyncio
    @pytest.mark.title("TC_LOGOUT_01 - Verify user can log out and is redirected to sign-in")
    async def test_logout(self, page: Page):
        dashboard = DashboardPage(page)
        await dashboard.navigate_to_dashboard()
        await dashboard.logout()
        await expect(page).to_have_url(re.compile(r"auth/sign-in"))
