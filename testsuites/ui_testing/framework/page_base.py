"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation relative to the configured base URL
    - Resolver (SmartLocator) and Action Executor (ElementActions) wiring
    - Bounded polling waits that keep Playwright's event loop running
    - Screenshot and debugging utilities
    - Failed network response capture

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

import allure
from loguru import logger
from playwright.sync_api import Page, Response

from autotest_tools.report_tools.allure_utils import attach_json, attach_png, attach_text

from .config_loader import UISettings
from .element_actions import ElementActions, RetryConfig, ScrollActions
from .smart_locator import LocatorSet, SmartLocator
from .waits import WaitPolicy, to_ms, wait_until


T = TypeVar("T")


class BasePage:
    """
    Base class for all page objects.

    Provides common functionality for:
        - Navigation and URL handling
        - Smart element interaction through LocatorSets
        - Screenshot capture
        - Failed response logging
        - Wait utilities

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/login"
            EMAIL_INPUT = LocatorSet.of("Email field", "input[name='id']")

            def enter_email(self, email: str):
                self.type_text(self.EMAIL_INPUT, email)
    """

    # Override in subclasses
    URL_PATH: str = "/"

    def __init__(
        self,
        page: Page,
        settings: Optional[UISettings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            settings: Session UISettings (defaults used when omitted)
            clock: Monotonic clock, injectable for tests
        """
        self.page = page
        self.settings = settings or UISettings()
        self.base_url = self.settings.base_url.rstrip("/")
        self.policy: WaitPolicy = self.settings.wait_policy
        self._clock = clock

        self.smart = SmartLocator(page, self.policy, clock=clock)
        self.actions = ElementActions(
            page,
            self.smart,
            RetryConfig(self.settings.retry_attempts),
            action_timeout=self.settings.action_timeout,
        )
        self.scroll = ScrollActions(page)

        self._failed_responses: List[Dict[str, Any]] = []
        self._setup_response_capture()

    def _setup_response_capture(self) -> None:
        """Record failing HTTP responses for failure diagnostics."""

        def capture_response(response: Response) -> None:
            if response.status < 400:
                return
            self._failed_responses.append({
                "timestamp": datetime.now().isoformat(),
                "url": response.url,
                "status": response.status,
            })
            # Keep only last 20 responses
            if len(self._failed_responses) > 20:
                self._failed_responses.pop(0)

        self.page.on("response", capture_response)

    @property
    def url(self) -> str:
        """Get full page URL."""
        return self.settings.url_for(self.URL_PATH)

    @property
    def current_url(self) -> str:
        return self.page.url

    def navigate(self, wait_for: str = "load") -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        self.navigate_to(self.URL_PATH, wait_for=wait_for)

    def navigate_to(self, path: str, wait_for: str = "load") -> None:
        """
        Navigate to specific path.

        Args:
            path: URL path to navigate to
            wait_for: Wait condition
        """
        full_url = self.settings.url_for(path)
        with allure.step(f"Navigate to {path}"):
            self.page.goto(
                full_url,
                wait_until=wait_for,
                timeout=to_ms(self.settings.page_load_timeout),
            )
            logger.debug(f"Navigated to: {full_url}")

    def wait_for_page_load(self, state: str = "load", timeout: Optional[float] = None) -> None:
        """
        Wait for the page to reach a stable load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in seconds
        """
        self.page.wait_for_load_state(
            state, timeout=to_ms(timeout or self.settings.page_load_timeout)
        )

    # =========================================================================
    # Element Interactions
    # =========================================================================

    def click(self, locator_set: LocatorSet, description: str = "") -> None:
        self.actions.click(locator_set, description=description or locator_set.name)

    def type_text(
        self,
        locator_set: LocatorSet,
        text: str,
        sensitive: bool = False,
    ) -> None:
        self.actions.type_text(
            locator_set, text, description=locator_set.name, sensitive=sensitive
        )

    def get_text(self, locator_set: LocatorSet) -> str:
        return self.actions.get_text(locator_set)

    def is_visible(self, locator_set: LocatorSet, timeout: float = 2.0) -> bool:
        """
        Check if element is visible.

        Args:
            locator_set: Target element
            timeout: Seconds to keep checking

        Returns:
            True if visible
        """
        return self.smart.is_displayed(locator_set, timeout=timeout)

    # =========================================================================
    # Wait Utilities
    # =========================================================================

    def wait_until(
        self,
        predicate: Callable[[], T],
        timeout: Optional[float] = None,
        description: str = "condition",
    ) -> T:
        """
        Poll ``predicate`` until truthy, pumping browser events in between.

        Raises:
            WaitTimeoutError: If the predicate never held
        """
        policy = self.policy if timeout is None else self.policy.with_timeout(timeout)
        return wait_until(
            predicate,
            policy,
            description=description,
            sleep=self.smart.sleep,
            clock=self._clock,
        )

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        screenshot_dir = Path(self.settings.screenshot_dir)
        screenshot_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = screenshot_dir / f"{name}_{timestamp}.png"

        png = self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            attach_png(png, name=name)

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Recent failed responses
            - Locator health report
        """
        with allure.step("Capture failure details"):
            self.screenshot(f"failure_{test_name}", attach_to_allure=True)
            attach_text(self.page.url, name="Current URL")

            if self._failed_responses:
                attach_json(self._failed_responses[-10:], name="Recent Failed Responses")

            attach_text(self.get_locator_health_report(), name="Locator Health")

    def get_locator_health_report(self) -> str:
        """Get smart locator health report."""
        return self.smart.get_health_report()


__all__ = [
    "BasePage",
]
