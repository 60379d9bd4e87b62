"""
================================================================================
Login Page Object
================================================================================

Login modal / page of the pinboard app.

Journeys:
  - login(email, password): open form if needed, fill, submit, confirm
  - login_with_enter(email, password): same, submitting with Enter

Confirmation: the header search box (signed-in) or a login error banner.
Which one appeared is for the test to assert.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure

from testsuites.ui_testing.framework.page_flow import FlowResult, element_visible
from testsuites.ui_testing.framework.smart_locator import Locator, LocatorSet

from .auth_page import AuthPage
from .common_locators import SEARCH_BOX


class LoginPage(AuthPage):
    """Login page object."""

    URL_PATH = "/login/"

    HEADER_BUTTON = LocatorSet.of(
        "Header login button",
        Locator.xpath("//*[@id='__PWS_ROOT__']/div[1]/header/div[1]/nav/div[2]/div[2]/button"),
        "button[data-test-id='login-button']",
        Locator.xpath("//header//button[contains(., 'Log in')]"),
        Locator.xpath("//button[contains(text(), 'Log in')]"),
    )
    HEADER_LABELS = ("log in", "login")

    EMAIL_INPUT = LocatorSet.of(
        "Email field",
        "input[name='id']",
        "input[type='email']",
        "input[autocomplete='username']",
    )
    PASSWORD_INPUT = LocatorSet.of(
        "Password field",
        "input[name='password']",
        "input[type='password']",
        "input[autocomplete='current-password']",
    )
    SUBMIT_BUTTON = LocatorSet.of(
        "Login submit button",
        "button[type='submit']",
        Locator.xpath("//button[contains(., 'Log in')]"),
        Locator.xpath("//button[contains(., 'Continue')]"),
    )
    EMAIL_ERROR = LocatorSet.of("Email error", Locator.id("email-error"))
    PASSWORD_ERROR = LocatorSet.of(
        "Password error",
        "div[data-test-id='touchableErrorMessage']",
        Locator.id("password-error"),
        Locator.xpath("//span[contains(text(), 'The password you entered is incorrect')]"),
    )
    ERROR_MESSAGE = LocatorSet.of(
        "Login error message",
        Locator.id("email-error"),
        Locator.id("password-error"),
        "div[data-test-id='touchableErrorMessage']",
        "div[data-test-id='error-message']",
        "[role='alert']",
    )
    FORM_FIELD = EMAIL_INPUT

    def click_login_button(self) -> bool:
        """Open the login form from the header; False if no login button is shown."""
        with self.navigating("Open login form"):
            return self._open_form()

    def enter_email(self, email: str) -> None:
        with self.field("Enter email"):
            self._type_optional(self.EMAIL_INPUT, email)

    def enter_password(self, password: str) -> None:
        with self.field("Enter password"):
            self._type_optional(self.PASSWORD_INPUT, password, sensitive=True)

    def submit(self) -> None:
        with self.submitting("Submit login form"):
            self.click(self.SUBMIT_BUTTON)

    def submit_with_enter(self) -> None:
        with self.submitting("Submit login form with Enter"):
            self.actions.press_key("Enter", self.PASSWORD_INPUT)

    def login(
        self,
        email: str,
        password: str,
        timeout: Optional[float] = None,
    ) -> FlowResult:
        """
        Log in and wait for the outcome (signed-in header or error banner).

        Empty values leave the field untouched so validation can be tested.

        Returns:
            FlowResult of the journey
        """
        with self.journey(f"Login as {email or '<empty>'}"):
            self._ensure_form()
            self.enter_email(email)
            self.enter_password(password)
            self.submit()
            self.confirm(
                element_visible(SEARCH_BOX),
                element_visible(self.ERROR_MESSAGE),
                timeout=timeout,
            )
        return self.last_result

    def login_with_enter(
        self,
        email: str,
        password: str,
        timeout: Optional[float] = None,
    ) -> FlowResult:
        with self.journey(f"Login with Enter as {email or '<empty>'}"):
            self._ensure_form()
            self.enter_email(email)
            self.enter_password(password)
            self.submit_with_enter()
            self.confirm(
                element_visible(SEARCH_BOX),
                element_visible(self.ERROR_MESSAGE),
                timeout=timeout,
            )
        return self.last_result

    # =========================================================================
    # Verification
    # =========================================================================

    @allure.step("Verify user is logged in")
    def is_logged_in(self, timeout: float = 10.0) -> bool:
        """True when the signed-in header search box is displayed."""
        return self.smart.is_displayed(SEARCH_BOX, timeout=timeout)

    def is_on_login_page(self) -> bool:
        return "/login" in self.page.url or self.smart.visible_now(self.EMAIL_INPUT) is not None

    @allure.step("Read email error")
    def email_error_text(self, timeout: float = 5.0) -> str:
        return self.smart.first_displayed_text(self.EMAIL_ERROR, timeout=timeout)

    @allure.step("Read password error")
    def password_error_text(self, timeout: float = 5.0) -> str:
        return self.smart.first_displayed_text(self.PASSWORD_ERROR, timeout=timeout)
