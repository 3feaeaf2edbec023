"""
Browser automation for the console suite.

- BrowserManager: Playwright lifecycle as an async context manager
- authenticate: One-time sign-in that saves the session state
"""
from .auth import authenticate
from .launcher import BrowserManager

__all__ = [
    "BrowserManager",
    "authenticate",
]
