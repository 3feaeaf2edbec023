from __future__ import annotations

import re
from typing import List

from playwright.async_api import Locator, Page, expect

from .base import BasePage


__all__ = ["BillingPage"]


class BillingPage(BasePage):
    """Billing overview: current plan, the three plan cards, transactions."""

    def __init__(self, page: Page) -> None:
        super().__init__(page)

        self.page_heading = page.get_by_role("heading", name="Billing - Overview")
        self.nav_billing = page.get_by_role("link", name="Billing")
        self.your_plan_section = page.locator("div").filter(
            has_text=re.compile(r"^Your PlanPay as you goUpgrade your plan to receive better rates$")
        ).first
        self.plans_heading = page.get_by_role("heading", name="Plans")
        self.active_badge = page.get_by_text("Active")
        self.transaction_history_heading = page.get_by_role("heading", name="Transaction History")

        # ──────── External Links (popups) ────────
        self.view_detailed_pricing_link = page.get_by_role("link", name="View detailed pricing")
        self.view_payment_history_button = page.get_by_role("button", name="View payment history")

    def pay_as_you_go_card(self) -> List[Locator]:
        page = self.page
        return [
            page.locator("span").filter(has_text="Pay as you go"),
            self.active_badge,
            page.get_by_text("Flexible top ups"),
            page.get_by_text("Add credits anytime, in any"),
            page.get_by_text("Industry leading speech to").first,
            page.get_by_text("Advanced intelligence features").first,
            page.get_by_text("Custom voice agent").first,
        ]

    def volume_card(self) -> List[Locator]:
        page = self.page
        return [
            page.get_by_text("Volume", exact=True),
            page.get_by_text("$500"),
            page.get_by_text("Prepaid credits for the year"),
            page.get_by_text("Industry leading speech to").nth(1),
            page.get_by_text("Advanced intelligence features").nth(1),
        ]

    def enterprise_card(self) -> List[Locator]:
        page = self.page
        return [
            page.get_by_text("Enterprise"),
            page.get_by_text("Custom pricing"),
            page.get_by_text("For businesses with large"),
            page.get_by_text("Access all models with our"),
            page.get_by_text("Access to custom-trained"),
            page.get_by_text("Highest concurrency support"),
            page.get_by_text("Self-hosted deployment options"),
            page.get_by_text("Dedicated SLAs and support"),
        ]

    @staticmethod
    def pricing_page_heading(popup: Page) -> Locator:
        return popup.get_by_role("heading", name="Shunya Labs Plans")

    @staticmethod
    def stripe_portal_link(popup: Page) -> Locator:
        return popup.get_by_role("link", name="Shunya Labs Inc", exact=True)

    async def navigate_to_billing(self) -> None:
        await self.open_from_dashboard(self.nav_billing)

    async def assert_page_loaded(self) -> None:
        await expect(self.page_heading).to_be_visible()

    async def assert_all_visible(self, locators: List[Locator]) -> None:
        for locator in locators:
            await expect(locator).to_be_visible()
