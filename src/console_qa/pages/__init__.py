"""
Page objects for the console screens.

Each page keeps its locators in ``__init__`` and exposes async actions and
``assert_*`` checks built on Playwright's ``expect``.
"""
from .api_keys import ApiKeysPage
from .base import BasePage
from .billing import BillingPage
from .contact_us import ContactUsPage
from .dashboard import DashboardPage
from .login import LoginPage
from .onboarding import OnboardingPage
from .settings import SettingsPage
from .usage import UsagePage

__all__ = [
    "ApiKeysPage",
    "BasePage",
    "BillingPage",
    "ContactUsPage",
    "DashboardPage",
    "LoginPage",
    "OnboardingPage",
    "SettingsPage",
    "UsagePage",
]
