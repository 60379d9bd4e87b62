"""
================================================================================
Logout Page Object
================================================================================

Account options dropdown in the signed-in header and its "Log out" entry.
Logout is confirmed by landing on the home page or the login page.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.page_flow import FlowResult, PageFlow, url_contains, url_is_one_of
from testsuites.ui_testing.framework.smart_locator import Locator, LocatorSet


class LogoutPage(PageFlow):
    """Logout page object."""

    ACCOUNT_DROPDOWN = LocatorSet.of(
        "Account options dropdown",
        ".VHreRh.pZY3za.XjRT60",
        "div[data-test-id='header-accounts-options-button'] button",
        "button[aria-label*='Accounts and more options']",
    )
    LOGOUT_BUTTON = LocatorSet.of(
        "Logout button",
        Locator.xpath("//span[contains(@class, 'WuRgKB') and contains(text(), 'Log out')]"),
        "div[data-test-id='header-menu-options-logout']",
        Locator.xpath("//div[@role='menu']//*[contains(text(), 'Log out')]"),
    )

    LOGIN_PATH_FRAGMENT = "/login"

    def is_dropdown_displayed(self, timeout: Optional[float] = None) -> bool:
        return self.smart.is_displayed(self.ACCOUNT_DROPDOWN, timeout=timeout or self.policy.timeout)

    def is_logout_button_displayed(self, timeout: Optional[float] = None) -> bool:
        return self.smart.is_displayed(self.LOGOUT_BUTTON, timeout=timeout or self.policy.timeout)

    def open_account_menu(self) -> None:
        """
        Open the account dropdown and wait until "Log out" is clickable.

        Raises:
            ElementNotFoundError: The dropdown or the logout entry never appeared
        """
        with self.navigating("Open account menu"):
            self.click(self.ACCOUNT_DROPDOWN)
            self.smart.resolve(self.LOGOUT_BUTTON, condition="clickable")

    def click_logout(self) -> None:
        with self.submitting("Click Log out"):
            self.click(self.LOGOUT_BUTTON)

    def logout(self, timeout: Optional[float] = None) -> FlowResult:
        """Log out through the account menu and wait for the landing page."""
        with self.journey("Logout"):
            self.open_account_menu()
            self.click_logout()
            self.confirm(
                url_is_one_of(*self.settings.home_urls),
                url_contains(self.LOGIN_PATH_FRAGMENT),
                timeout=timeout,
            )
        return self.last_result

    @allure.step("Verify logout succeeded")
    def is_logout_successful(self) -> bool:
        current = self.page.url.rstrip("/")
        landed = current in {u.rstrip("/") for u in self.settings.home_urls}
        success = landed or self.LOGIN_PATH_FRAGMENT in current
        logger.info(f"Logout successful: {success} ({self.page.url})")
        return success
