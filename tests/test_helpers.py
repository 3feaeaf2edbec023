"""
Test suite for scenario helpers.

Run with: pytest tests/test_helpers.py -v
"""
from __future__ import annotations

import re
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from console_qa.utils.helpers import (
    PollTimeoutError,
    days_ago,
    dismiss_modal_if_present,
    element_exists,
    format_date,
    generate_unique_name,
    parse_amount,
    poll_until,
    retry,
    wait_for_toast,
)


class TestPollUntil:
    """Bounded polling for asynchronous backend effects."""

    @pytest.mark.asyncio
    async def test_returns_first_accepted_value(self):
        probe = AsyncMock(side_effect=[10.0, 10.0, 9.5])

        value = await poll_until(probe, lambda v: v < 10.0, timeout=5, intervals=(0.01,))

        assert value == 9.5
        assert probe.await_count == 3

    @pytest.mark.asyncio
    async def test_immediate_success_does_not_sleep(self):
        probe = AsyncMock(return_value=3)
        assert await poll_until(probe, lambda v: v == 3, timeout=0) == 3
        assert probe.await_count == 1

    @pytest.mark.asyncio
    async def test_timeout_reports_last_value(self):
        probe = AsyncMock(return_value=0)

        with pytest.raises(PollTimeoutError) as exc_info:
            await poll_until(probe, lambda v: v > 0, timeout=0.05, intervals=(0.01,),
                             message="log count to grow")

        assert exc_info.value.last_value == 0
        assert "log count to grow" in str(exc_info.value)
        assert probe.await_count >= 2

    @pytest.mark.asyncio
    async def test_timeout_is_an_assertion_failure(self):
        with pytest.raises(AssertionError):
            await poll_until(AsyncMock(return_value=False), bool, timeout=0.01, intervals=(0.01,))

    @pytest.mark.asyncio
    async def test_empty_intervals_rejected(self):
        with pytest.raises(ValueError):
            await poll_until(AsyncMock(return_value=1), bool, intervals=())


class TestRetry:
    @pytest.mark.asyncio
    async def test_succeeds_after_failures(self):
        action = AsyncMock(side_effect=[RuntimeError("flaky"), "ok"])
        assert await retry(action, retries=3, delay=0) == "ok"

    @pytest.mark.asyncio
    async def test_reraises_last_error(self):
        action = AsyncMock(side_effect=RuntimeError("down"))

        with pytest.raises(RuntimeError, match="down"):
            await retry(action, retries=2, delay=0)
        assert action.await_count == 2


class TestParseAmount:
    @pytest.mark.parametrize("text,expected", [
        ("$1,234.56", 1234.56),
        ("Balance: $12.50", 12.5),
        ("-$0.05", -0.05),
        ("- $ 3", -3.0),
        ("42", 42.0),
    ])
    def test_amounts(self, text: str, expected: float):
        assert parse_amount(text) == pytest.approx(expected)

    def test_no_amount(self):
        with pytest.raises(ValueError):
            parse_amount("No balance")


class TestSmallHelpers:
    def test_unique_name(self):
        name = generate_unique_name("auto_key")
        assert re.fullmatch(r"auto_key-\d{13}", name)

    def test_format_date(self):
        assert format_date(date(2026, 2, 9)) == "2026-02-09"

    def test_days_ago(self):
        assert days_ago(7, now=datetime(2026, 2, 19, 8)) == datetime(2026, 2, 12, 8)

    @pytest.mark.asyncio
    async def test_dismiss_modal_clicks_close(self):
        close_button = MagicMock()
        close_button.wait_for = AsyncMock()
        close_button.click = AsyncMock()
        page = MagicMock()
        page.locator.return_value.first = close_button
        page.wait_for_timeout = AsyncMock()

        assert await dismiss_modal_if_present(page) is True
        close_button.click.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dismiss_modal_absent(self):
        page = MagicMock()
        page.locator.return_value.first.wait_for = AsyncMock(side_effect=PlaywrightTimeout("none"))

        assert await dismiss_modal_if_present(page, timeout=10) is False


class TestPageProbes:
    @pytest.mark.asyncio
    async def test_toast_scoped_to_text(self):
        page = MagicMock()
        page.locator.return_value.first.wait_for = AsyncMock()

        assert await wait_for_toast(page, "Profile updated") is True
        selector = page.locator.call_args.args[0]
        assert selector.endswith(':has-text("Profile updated")')

    @pytest.mark.asyncio
    async def test_toast_timeout(self):
        page = MagicMock()
        page.locator.return_value.first.wait_for = AsyncMock(side_effect=PlaywrightTimeout("none"))

        assert await wait_for_toast(page, timeout=10) is False

    @pytest.mark.asyncio
    async def test_element_exists_counts_matches(self):
        page = MagicMock()
        page.locator.return_value.count = AsyncMock(side_effect=[2, 0])

        assert await element_exists(page, "table tr") is True
        assert await element_exists(page, "table tr") is False
