"""
Test suite for BrowserManager with Playwright mocked out.

Run with: pytest tests/test_launcher.py -v
"""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from console_qa.browser.launcher import BrowserManager


@pytest.fixture
def playwright_stack():
    """async_playwright() -> driver -> chromium browser -> context -> page."""
    page = MagicMock()
    page.screenshot = AsyncMock()

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock()

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    driver = MagicMock()
    driver.chromium.launch = AsyncMock(return_value=browser)
    driver.stop = AsyncMock()

    starter = MagicMock()
    starter.start = AsyncMock(return_value=driver)

    with patch("console_qa.browser.launcher.async_playwright", return_value=starter):
        yield driver, browser, context, page


class TestBrowserManager:
    @pytest.mark.asyncio
    async def test_context_rooted_at_base_url(self, qa_config, playwright_stack):
        driver, browser, context, page = playwright_stack

        async with BrowserManager(qa_config) as opened:
            assert opened is page

        options = browser.new_context.await_args.kwargs
        assert options["base_url"] == qa_config.base_url
        assert "storage_state" not in options
        context.set_default_timeout.assert_called_once_with(qa_config.browser_timeout)
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        driver.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_saved_session_is_loaded(self, qa_config, playwright_stack, tmp_path):
        _, browser, _, _ = playwright_stack
        state = tmp_path / "user.json"
        state.write_text("{}")

        manager = BrowserManager(qa_config, storage_state=state)
        async with manager:
            pass

        assert manager.signed_in is True
        assert browser.new_context.await_args.kwargs["storage_state"] == str(state)

    def test_missing_session_file_starts_fresh(self, qa_config, tmp_path):
        manager = BrowserManager(qa_config, storage_state=tmp_path / "absent.json")
        assert manager.signed_in is False
        assert "storage_state" not in manager.context_options()

    @pytest.mark.asyncio
    async def test_error_screenshot_and_reraise(self, qa_config, playwright_stack):
        _, _, _, page = playwright_stack

        with pytest.raises(AssertionError):
            async with BrowserManager(qa_config):
                raise AssertionError("heading not visible")

        path = page.screenshot.await_args.kwargs["path"]
        assert path.startswith(str(qa_config.paths.screenshots / "error_"))

    @pytest.mark.asyncio
    async def test_launch_failure_cleans_up(self, qa_config, playwright_stack):
        driver, browser, _, _ = playwright_stack
        browser.new_context.side_effect = Exception("no display")

        with pytest.raises(RuntimeError, match="Browser launch failed"):
            async with BrowserManager(qa_config):
                pass

        browser.close.assert_awaited_once()
        driver.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_screenshot_requires_page(self, qa_config):
        with pytest.raises(RuntimeError):
            await BrowserManager(qa_config).take_screenshot()
