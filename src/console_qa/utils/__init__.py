"""Scenario helpers and shared test data."""
from .helpers import (
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
