"""
Helpers for console scenarios.

Includes bounded polling for backend effects that land asynchronously
(balance deduction, new log entries), plus small page and date utilities.

Example Usage:
    >>> balance = await poll_until(
    ...     usage_page.get_balance_with_reload,
    ...     lambda value: value < initial_balance,
    ...     timeout=30.0,
    ...     intervals=(3.0, 5.0),
    ...     message="balance to decrease",
    ... )
"""
from __future__ import annotations

import asyncio
import logging
import re
import time
from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from playwright.async_api import Page, TimeoutError as PlaywrightTimeout


__all__ = [
    "PollTimeoutError",
    "days_ago",
    "dismiss_modal_if_present",
    "element_exists",
    "format_date",
    "generate_unique_name",
    "parse_amount",
    "poll_until",
    "retry",
    "wait_for_toast",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


TOAST_SELECTOR = '[class*="toast"], [role="status"], [role="alert"], [class*="notification"]'
MODAL_CLOSE_SELECTOR = '[aria-label="Close"], button:has-text("Close"), button:has-text("Cancel")'
AMOUNT_PATTERN = re.compile(r"(-)?\s*\$?\s*(\d[\d,]*(?:\.\d+)?)")


class PollTimeoutError(AssertionError):
    """A polled condition did not hold before the deadline."""

    def __init__(self, message: str, last_value: object, elapsed: float) -> None:
        super().__init__(
            f"Timed out after {elapsed:.1f}s waiting for {message} (last value: {last_value!r})"
        )
        self.last_value = last_value
        self.elapsed = elapsed


async def poll_until(
    probe: Callable[[], Awaitable[T]],
    predicate: Callable[[T], bool],
    timeout: float = 30.0,
    intervals: Sequence[float] = (1.0,),
    message: str = "condition",
) -> T:
    """
    Call ``probe`` until ``predicate`` accepts its result.

    Args:
        probe: Async callable producing the observed value.
        predicate: Acceptance test for the value.
        timeout: Overall bound in seconds.
        intervals: Sleep between probes; the last one repeats.
        message: What is being waited for (used in the error).

    Returns:
        The first accepted value.

    Raises:
        PollTimeoutError: If the bound is exceeded.
    """
    if not intervals:
        raise ValueError("intervals must not be empty")

    loop = asyncio.get_running_loop()
    started = loop.time()
    deadline = started + timeout
    attempt = 0

    while True:
        value = await probe()
        if predicate(value):
            logger.debug(f"Poll satisfied after {attempt + 1} probe(s): {message}")
            return value

        remaining = deadline - loop.time()
        if remaining <= 0:
            raise PollTimeoutError(message, value, loop.time() - started)

        delay = intervals[min(attempt, len(intervals) - 1)]
        attempt += 1
        await asyncio.sleep(min(delay, remaining))


async def retry(
    action: Callable[[], Awaitable[T]],
    retries: int = 3,
    delay: float = 1.0,
) -> T:
    """Run ``action`` up to ``retries`` times, re-raising the last error."""
    for attempt in range(1, retries + 1):
        try:
            return await action()
        except Exception as e:
            if attempt == retries:
                raise
            logger.warning(f"Attempt {attempt}/{retries} failed: {e}")
            await asyncio.sleep(delay)
    raise ValueError("retries must be at least 1")


def generate_unique_name(prefix: str) -> str:
    """``<prefix>-<epoch millis>``."""
    return f"{prefix}-{int(time.time() * 1000)}"


def format_date(value: date) -> str:
    """ISO date (``YYYY-MM-DD``) as typed into date pickers."""
    return value.strftime("%Y-%m-%d")


def days_ago(days: int, now: Optional[datetime] = None) -> datetime:
    return (now or datetime.now()) - timedelta(days=days)


def parse_amount(text: str) -> float:
    """
    Parse a money amount shown on screen, e.g. ``$1,234.56`` or ``-$0.05``.

    Raises:
        ValueError: If the text holds no number.
    """
    match = AMOUNT_PATTERN.search(text)
    if not match:
        raise ValueError(f"No amount found in {text!r}")
    amount = float(match.group(2).replace(",", ""))
    return -amount if match.group(1) else amount


async def wait_for_toast(page: Page, text: Optional[str] = None, timeout: float = 5000) -> bool:
    """Wait for a toast/notification; False if none appears in time."""
    selector = TOAST_SELECTOR if text is None else f':is({TOAST_SELECTOR}):has-text("{text}")'
    try:
        await page.locator(selector).first.wait_for(state="visible", timeout=timeout)
        return True
    except PlaywrightTimeout:
        return False


async def dismiss_modal_if_present(page: Page, timeout: float = 2000) -> bool:
    """Close a visible modal or dialog, if any."""
    close_button = page.locator(MODAL_CLOSE_SELECTOR).first
    try:
        await close_button.wait_for(state="visible", timeout=timeout)
    except PlaywrightTimeout:
        return False
    await close_button.click()
    await page.wait_for_timeout(500)
    logger.debug("Dismissed modal")
    return True


async def element_exists(page: Page, selector: str) -> bool:
    """True if the selector matches anything in the DOM, visible or not."""
    return await page.locator(selector).count() > 0
