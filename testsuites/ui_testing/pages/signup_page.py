"""
================================================================================
Signup Page Object
================================================================================

Signup modal of the pinboard app: email, password and birthdate, then
Continue. Each field reports validation errors under its own id
(email-error, password-error, birthdate-error).

Confirmation: the signed-in header search box or any validation error.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure

from testsuites.ui_testing.framework.page_flow import FlowResult, element_visible
from testsuites.ui_testing.framework.smart_locator import Locator, LocatorSet

from .auth_page import AuthPage
from .common_locators import SEARCH_BOX


class SignupPage(AuthPage):
    """Signup page object."""

    HEADER_BUTTON = LocatorSet.of(
        "Header signup button",
        Locator.xpath("//*[@id='__PWS_ROOT__']/div[1]/header/div[1]/nav/div[2]/div[3]/button"),
        Locator.xpath("//button[contains(text(), 'Sign up')]"),
        "button[data-test-id='sign-up-button']",
        Locator.xpath("//header//button[contains(., 'Sign up')]"),
    )
    HEADER_LABELS = ("sign up", "signup")

    EMAIL_INPUT = LocatorSet.of(
        "Signup email field",
        "input[data-test-id='emailInputField']",
        "input[name='id']",
        "input[type='email']",
        "input[autocomplete='email']",
    )
    PASSWORD_INPUT = LocatorSet.of(
        "Signup password field",
        "input[data-test-id='passwordInputField']",
        "input[name='password']",
        "input[type='password']",
    )
    BIRTHDATE_INPUT = LocatorSet.of(
        "Birthdate field",
        Locator.id("birthdate"),
        "input[type='date']",
        "input[name='birthdate']",
    )
    CONTINUE_BUTTON = LocatorSet.of(
        "Continue button",
        "button[type='submit']",
        "button[aria-label*='Continue']",
        Locator.xpath("//button[contains(text(), 'Continue')]"),
    )
    EMAIL_ERROR = LocatorSet.of("Email error", Locator.id("email-error"))
    PASSWORD_ERROR = LocatorSet.of("Password error", Locator.id("password-error"))
    BIRTHDATE_ERROR = LocatorSet.of("Birthdate error", Locator.id("birthdate-error"))
    ERROR_MESSAGE = LocatorSet.of(
        "Signup error message",
        Locator.id("email-error"),
        Locator.id("password-error"),
        Locator.id("birthdate-error"),
        "div[data-test-id='error-message']",
        "[role='alert']",
    )
    FORM_FIELD = EMAIL_INPUT

    def click_signup_button(self) -> bool:
        """Open the signup form from the header; False if no signup button is shown."""
        with self.navigating("Open signup form"):
            return self._open_form()

    def enter_email(self, email: str) -> None:
        with self.field("Enter signup email"):
            self._type_optional(self.EMAIL_INPUT, email)

    def enter_password(self, password: str) -> None:
        with self.field("Enter signup password"):
            self._type_optional(self.PASSWORD_INPUT, password, sensitive=True)

    def enter_birthdate(self, birthdate: str) -> None:
        """Type an ISO date (YYYY-MM-DD), the value format of date inputs."""
        with self.field("Enter birthdate"):
            self._type_optional(self.BIRTHDATE_INPUT, birthdate)

    def submit(self) -> None:
        with self.submitting("Submit signup form"):
            self.click(self.CONTINUE_BUTTON)

    def signup(
        self,
        email: str,
        password: str,
        birthdate: str,
        timeout: Optional[float] = None,
    ) -> FlowResult:
        """
        Fill and submit the signup form, then wait for an outcome.

        Empty values leave the field untouched so validation can be tested.
        """
        with self.journey(f"Sign up as {email or '<empty>'}"):
            self._ensure_form()
            self.enter_email(email)
            self.enter_password(password)
            self.enter_birthdate(birthdate)
            self.submit()
            self.confirm(
                element_visible(SEARCH_BOX),
                element_visible(self.ERROR_MESSAGE),
                timeout=timeout,
            )
        return self.last_result

    # =========================================================================
    # Verification
    # =========================================================================

    @allure.step("Verify signed up user is logged in")
    def is_logged_in(self, timeout: float = 10.0) -> bool:
        return self.smart.is_displayed(SEARCH_BOX, timeout=timeout)

    def is_on_signup_page(self) -> bool:
        return "/signup" in self.page.url or self.smart.visible_now(self.BIRTHDATE_INPUT) is not None

    def is_email_field_displayed(self) -> bool:
        return self.smart.visible_now(self.EMAIL_INPUT) is not None

    def is_password_field_displayed(self) -> bool:
        return self.smart.visible_now(self.PASSWORD_INPUT) is not None

    def is_birthdate_field_displayed(self) -> bool:
        return self.smart.visible_now(self.BIRTHDATE_INPUT) is not None

    @allure.step("Read email error")
    def email_error_text(self, timeout: float = 5.0) -> str:
        return self.smart.first_displayed_text(self.EMAIL_ERROR, timeout=timeout)

    @allure.step("Read password error")
    def password_error_text(self, timeout: float = 5.0) -> str:
        return self.smart.first_displayed_text(self.PASSWORD_ERROR, timeout=timeout)

    @allure.step("Read birthdate error")
    def birthdate_error_text(self, timeout: float = 5.0) -> str:
        return self.smart.first_displayed_text(self.BIRTHDATE_ERROR, timeout=timeout)
