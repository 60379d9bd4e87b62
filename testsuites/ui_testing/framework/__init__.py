"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework.

Components:
    - smart_locator: Resolver with ordered fallback locators
    - element_actions: Action executor (stale retry, intercepted-click fallback)
    - page_flow: Page-flow state machine and confirmation signals
    - page_base: Base page object for common operations
    - browser_manager: Browser lifecycle management
    - config_loader / data_provider: Settings and injected test data

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .config_loader import ConfigLoader, UISettings, load_settings
from .data_provider import CsvTestDataProvider, JsonTestDataProvider
from .element_actions import ElementActions, RetryConfig
from .exceptions import ElementNotFoundError, RetryExhaustedError, UIAutomationError
from .page_base import BasePage
from .page_flow import FlowResult, FlowState, PageFlow
from .smart_locator import Locator, LocatorSet, SmartLocator

__all__ = [
    "BasePage",
    "BrowserManager",
    "ConfigLoader",
    "CsvTestDataProvider",
    "ElementActions",
    "ElementNotFoundError",
    "FlowResult",
    "FlowState",
    "JsonTestDataProvider",
    "Locator",
    "LocatorSet",
    "PageFlow",
    "RetryConfig",
    "RetryExhaustedError",
    "SmartLocator",
    "UIAutomationError",
    "UISettings",
    "load_settings",
]
