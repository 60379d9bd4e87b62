"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - Single browser instance per session
    - Context isolation per test
    - Fresh session reset (cookies + web storage) between tests
    - Launch options tuned for stable runs (no notification prompts,
      automation banner off)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    sync_playwright,
)

from .config_loader import UISettings
from .waits import to_ms


CLEAR_STORAGE_JS = "() => { window.localStorage.clear(); window.sessionStorage.clear(); }"


class BrowserManager:
    """
    Manages the browser instance and its contexts for UI testing.

    Usage:
        with BrowserManager.from_settings(settings) as manager:
            page = manager.new_page()
            page.goto("https://example.com")
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": [
            "--disable-notifications",
            "--disable-blink-features=AutomationControlled",
            "--disable-infobars",
            "--start-maximized",
        ],
    }

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: bool = True,
        browser_type: str = "chromium",
        viewport: Optional[Dict[str, int]] = None,
        slow_mo: int = 0,
        default_timeout: Optional[float] = None,
        navigation_timeout: Optional[float] = None,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode
            browser_type: Browser to use - 'chromium', 'firefox', 'webkit'
            viewport: Context viewport, e.g. {"width": 1280, "height": 720}
            slow_mo: Delay in ms between Playwright operations
            default_timeout: Default Playwright timeout in seconds for new pages
            navigation_timeout: Default timeout in seconds for goto, reload and
                other navigations of new pages
        """
        self.headless = headless
        self.browser_type = browser_type
        self.viewport = viewport or self.DEFAULT_CONTEXT_OPTIONS["viewport"]
        self.slow_mo = slow_mo
        self.default_timeout = default_timeout
        self.navigation_timeout = navigation_timeout

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    @classmethod
    def from_settings(cls, settings: UISettings) -> "BrowserManager":
        width, height = settings.viewport
        return cls(
            headless=settings.headless,
            browser_type=settings.browser,
            viewport={"width": width, "height": height},
            slow_mo=settings.slow_mo,
            default_timeout=settings.action_timeout,
            navigation_timeout=settings.page_load_timeout,
        )

    def __enter__(self) -> "BrowserManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = sync_playwright().start()

        # Select browser type
        if self.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
            "slow_mo": self.slow_mo,
        }
        # Chromium-only switches
        if self.browser_type != "chromium":
            launch_options.pop("args")

        self._browser = browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.browser_type} "
            f"(headless={self.headless})"
        )

    def close(self) -> None:
        """Close all contexts and browser."""
        for context in self._contexts:
            try:
                context.close()
            except PlaywrightError as e:
                logger.debug(f"Context already closed: {e}")
        self._contexts.clear()

        if self._browser:
            self._browser.close()
            self._browser = None

        if self._playwright:
            self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new browser context.

        Each context is isolated - separate cookies, localStorage, etc.
        Notifications are denied by granting no permissions.

        Args:
            **options: Additional context options

        Returns:
            New BrowserContext
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {
            **self.DEFAULT_CONTEXT_OPTIONS,
            "viewport": self.viewport,
            "permissions": [],
            **options,
        }
        context = self._browser.new_context(**context_options)
        if self.default_timeout is not None:
            context.set_default_timeout(to_ms(self.default_timeout))
        if self.navigation_timeout is not None:
            context.set_default_navigation_timeout(to_ms(self.navigation_timeout))
        self._contexts.append(context)
        return context

    def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """
        Create new page in new or existing context.

        Args:
            context: Existing context to use (creates new if None)
            **context_options: Options for new context

        Returns:
            New Page
        """
        if context is None:
            context = self.new_context(**context_options)
        return context.new_page()

    @staticmethod
    def fresh_session(page: Page) -> None:
        """
        Reset a page to a logged-out state.

        Clears cookies of its context plus localStorage and sessionStorage of
        the current origin. Pages still on about:blank have no storage.
        """
        page.context.clear_cookies()
        if page.url.startswith("http"):
            page.evaluate(CLEAR_STORAGE_JS)
        logger.debug("Fresh session: cookies and web storage cleared")

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
]
