"""
================================================================================
Edit Profile Page Object
================================================================================

Public profile settings: first/last name, about, username.

Reached from the header avatar: avatar -> profile card -> "Edit profile".
A save is confirmed by the success toast or by the Save button going back to
its disabled state once the form is persisted.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.page_flow import FlowResult, PageFlow, element_visible
from testsuites.ui_testing.framework.smart_locator import Locator, LocatorSet


class EditProfilePage(PageFlow):
    """Edit profile page object."""

    URL_PATH = "/settings/profile"

    AVATAR = LocatorSet.of(
        "Header avatar",
        "div[data-test-id='header-profile']",
        "img[alt*='profile' i]",
        "svg[aria-label*='profile' i]",
        Locator.xpath("//header//img"),
        Locator.xpath("//header//svg"),
    )
    PROFILE_CARD = LocatorSet.of(
        "Profile card",
        Locator.xpath("//div[@role='menu']//a[contains(@href, '/')]"),
    )
    EDIT_PROFILE_LINK = LocatorSet.of(
        "Edit profile link",
        Locator.xpath("//div[@role='menu']//a[contains(@href, 'settings')]"),
        "a[href*='/settings/profile']",
        Locator.xpath("//a[contains(., 'Edit profile')]"),
    )

    FIRST_NAME = LocatorSet.of("First name", Locator.id("first_name"))
    LAST_NAME = LocatorSet.of("Last name", Locator.id("last_name"))
    ABOUT = LocatorSet.of("About", Locator.id("about"))
    USERNAME = LocatorSet.of("Username", Locator.id("username"))

    SAVE_BUTTON = LocatorSet.of(
        "Profile save button",
        Locator.xpath("//button[.//div[text()='Save']]"),
        "button[type='submit']",
    )
    SAVE_SETTLED = LocatorSet.of(
        "Disabled save button",
        Locator.xpath("//button[@disabled and .//div[text()='Save']]"),
        "button[type='submit'][disabled]",
    )
    SAVE_TOAST = LocatorSet.of(
        "Profile saved toast",
        "div[data-test-id='toast']",
        Locator.xpath("//*[contains(text(), 'Profile saved')]"),
    )

    def go_to_edit_profile(self) -> "EditProfilePage":
        """
        Open the profile settings form from the header avatar.

        Raises:
            ElementNotFoundError: A menu entry never appeared
        """
        logger.info("Starting Edit Profile navigation")
        with self.navigating("Open profile menu from avatar"):
            self.click(self.AVATAR)
        with self.navigating("Open profile card"):
            self.click(self.PROFILE_CARD)
        with self.navigating("Open edit profile"):
            self.click(self.EDIT_PROFILE_LINK)
            self.smart.resolve(self.FIRST_NAME, condition="visible")
        logger.info("✅ Edit Profile page loaded")
        return self

    def set_first_name(self, value: str) -> None:
        with self.field("Set first name"):
            self.type_text(self.FIRST_NAME, value)

    def set_last_name(self, value: str) -> None:
        with self.field("Set last name"):
            self.type_text(self.LAST_NAME, value)

    def set_about(self, value: str) -> None:
        with self.field("Set about"):
            self.type_text(self.ABOUT, value)

    def set_username(self, value: str) -> None:
        with self.field("Set username"):
            self.type_text(self.USERNAME, value)

    def click_save(self) -> None:
        with self.submitting("Click Save"):
            self.actions.scroll_into_view(self.SAVE_BUTTON)
            self.click(self.SAVE_BUTTON)

    def update_profile(
        self,
        first_name: str = "",
        last_name: str = "",
        about: str = "",
        username: str = "",
        timeout: Optional[float] = None,
    ) -> FlowResult:
        """
        Edit the profile form and save it. Blank values are left as they are.

        Returns:
            FlowResult of the journey
        """
        updates = (
            (self.set_first_name, first_name),
            (self.set_last_name, last_name),
            (self.set_about, about),
            (self.set_username, username),
        )
        with self.journey("Update profile"):
            self.go_to_edit_profile()
            for setter, value in updates:
                if value and value.strip():
                    setter(value)
            self.click_save()
            self.confirm(
                element_visible(self.SAVE_TOAST),
                element_visible(self.SAVE_SETTLED),
                timeout=timeout,
            )
        return self.last_result

    # =========================================================================
    # Getters
    # =========================================================================

    def get_first_name(self) -> str:
        return self.actions.get_value(self.FIRST_NAME)

    def get_last_name(self) -> str:
        return self.actions.get_value(self.LAST_NAME)

    def get_about(self) -> str:
        return self.actions.get_value(self.ABOUT)

    def get_username(self) -> str:
        return self.actions.get_value(self.USERNAME)

    @allure.step("Verify Save button is visible")
    def is_save_button_visible(self, timeout: float = 5.0) -> bool:
        return self.smart.is_displayed(self.SAVE_BUTTON, timeout=timeout)
