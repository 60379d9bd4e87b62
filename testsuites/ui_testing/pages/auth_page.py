"""
Shared behaviour of the login and signup forms: both open from a header
button, both report field errors in banners below the inputs.
"""

from __future__ import annotations

from typing import Tuple

from loguru import logger

from testsuites.ui_testing.framework.page_flow import PageFlow
from testsuites.ui_testing.framework.smart_locator import LocatorSet


class AuthPage(PageFlow):
    """Base for header-launched authentication forms."""

    # Set by subclasses
    HEADER_BUTTON: LocatorSet
    HEADER_LABELS: Tuple[str, ...] = ()
    FORM_FIELD: LocatorSet
    ERROR_MESSAGE: LocatorSet

    def open(self, path: str = "/") -> "AuthPage":
        """Navigate to ``path`` (home shows the header buttons)."""
        with self.navigating(f"Open {path}"):
            self.navigate_to(path)
            self.wait_for_page_load()
        return self

    def _open_form(self) -> bool:
        """
        Click the header button that launches the form.

        The button is only clicked when its label matches HEADER_LABELS (or
        is empty). Returns False when no such button is shown.
        """
        if not self.smart.is_displayed(self.HEADER_BUTTON, timeout=self.policy.locator_timeout):
            logger.info(f"ℹ️ No '{self.HEADER_BUTTON.name}', form may already be shown")
            return False

        label = self.actions.get_text(self.HEADER_BUTTON).strip().lower()
        if label and not any(word in label for word in self.HEADER_LABELS):
            logger.warning(f"⚠️ '{self.HEADER_BUTTON.name}' reads '{label}', not clicking it")
            return False

        self.click(self.HEADER_BUTTON)
        self.smart.resolve(self.FORM_FIELD, condition="visible")
        return True

    def _ensure_form(self) -> None:
        if not self.smart.is_displayed(self.FORM_FIELD, timeout=self.policy.locator_timeout):
            with self.navigating(f"Open form via {self.HEADER_BUTTON.name}"):
                self._open_form()

    def _type_optional(self, locator_set: LocatorSet, value: str, sensitive: bool = False) -> None:
        if not value:
            logger.info(f"Leaving {locator_set.name} empty")
            return
        self.type_text(locator_set, value, sensitive=sensitive)

    def is_error_displayed(self, timeout: float = 5.0) -> bool:
        return self.smart.is_displayed(self.ERROR_MESSAGE, timeout=timeout)

    def error_text(self, timeout: float = 5.0) -> str:
        """Text of the first displayed error, "" when there is none."""
        return self.smart.first_displayed_text(self.ERROR_MESSAGE, timeout=timeout)
