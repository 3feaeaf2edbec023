"""
Usage screens: analytics overview, request logs, and the account balance and
billing deduction that a playground run should produce.

Values read from the page are parsed with ``parse_amount`` so polling code can
compare them numerically.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from playwright.async_api import Locator, Page, expect

from ..utils.helpers import parse_amount
from ..utils.test_data import ROUTES
from .base import BasePage


__all__ = ["UsagePage"]

logger = logging.getLogger(__name__)


PLAYGROUND_TIMEOUT = 15000
ANALYSIS_TIMEOUT = 90000


def today_label(today: Optional[datetime] = None) -> str:
    """Date text the logs and transactions tables show, e.g. ``Feb 19, 2026``."""
    today = today or datetime.now()
    return f"{today:%b} {today.day}, {today.year}"


class UsagePage(BasePage):

    def __init__(self, page: Page) -> None:
        super().__init__(page)

        # ──────── Overview ────────
        self.overview_heading = page.get_by_role("heading", name="Usage Analytics")
        self.date_range_filter = page.get_by_role("combobox").first
        self.metric_filter = page.get_by_role("combobox").nth(1)
        self.usage_chart_line = page.locator(".recharts-line-curve, svg path.recharts-curve")

        # ──────── Logs ────────
        self.logs_heading = page.get_by_role("heading", name="Usage Logs")
        self.log_rows = page.locator("table tbody tr")

        # ──────── Dashboard balance ────────
        self.balance_value = page.get_by_text("Balance").locator("xpath=following::*[contains(text(), '$')][1]")

        # ──────── Playground (new tab) ────────
        self.nav_playground = page.get_by_role("link", name="Playground")

        # ──────── Billing ────────
        self.transaction_rows = page.get_by_role("row").filter(has_text="Deduction")

    # ──────── Navigation ────────

    async def navigate_to_dashboard(self) -> None:
        await self.page.goto(ROUTES["dashboard"])
        await self.wait_for_page_load()

    async def navigate_to_usage_overview(self) -> None:
        await self.page.goto(ROUTES["usage"])
        await self.wait_for_page_load()

    async def navigate_to_usage_logs(self) -> None:
        await self.page.goto(ROUTES["usage_logs"])
        await self.wait_for_page_load()

    async def navigate_to_billing(self) -> None:
        await self.page.goto(ROUTES["billing"])
        await self.wait_for_page_load()

    async def open_playground(self) -> Page:
        await self.navigate_to_dashboard()
        return await self.open_popup(self.nav_playground)

    async def run_customer_support_analysis(self, popup: Page) -> None:
        """Run the sample Customer Support Call analysis in the playground tab."""
        await expect(popup.get_by_role("heading", name="API Playground")).to_be_visible(
            timeout=PLAYGROUND_TIMEOUT
        )
        await popup.get_by_text("Customer Support Call").first.click()
        await popup.get_by_role("button", name="Run").click()
        await expect(popup.get_by_text("Transcript").first).to_be_visible(timeout=ANALYSIS_TIMEOUT)
        logger.info("Playground analysis finished")

    # ──────── Readings ────────

    async def get_balance(self) -> float:
        return parse_amount(await self.get_text(self.balance_value))

    async def get_balance_with_reload(self) -> float:
        await self.navigate_to_dashboard()
        return await self.get_balance()

    def _today_log_rows(self) -> Locator:
        return self.log_rows.filter(has_text=today_label())

    async def get_log_entries_count_for_today(self) -> int:
        await expect(self.logs_heading).to_be_visible()
        return await self._today_log_rows().count()

    async def get_log_entries_count_with_reload(self) -> int:
        await self.navigate_to_usage_logs()
        return await self.get_log_entries_count_for_today()

    async def get_latest_log_cost(self) -> float:
        latest = self._today_log_rows().first
        return parse_amount(await self.get_text(latest.locator("td").last))

    async def is_chart_rendered(self) -> bool:
        await self.page.reload(wait_until="networkidle")
        return await self.usage_chart_line.count() > 0

    async def get_billing_deduction_amount(self) -> float:
        row = self.transaction_rows.filter(has_text=today_label()).first
        return abs(parse_amount(await self.get_text(row.locator("td").last)))

    # ──────── Assertions ────────

    async def assert_usage_overview_loaded(self) -> None:
        await expect(self.overview_heading).to_be_visible()

    async def assert_filters_visible(self) -> None:
        await expect(self.date_range_filter).to_be_visible()
        await expect(self.metric_filter).to_be_visible()

    async def assert_usage_logs_loaded(self) -> None:
        await expect(self.logs_heading).to_be_visible()

    async def assert_billing_deduction_for_today(self) -> None:
        await expect(self.transaction_rows.filter(has_text=today_label()).first).to_be_visible()
