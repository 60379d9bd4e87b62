"""
================================================================================
Pin Page Object
================================================================================

Saving pins from the grid: the Save button is only rendered while a pin is
hovered, and saving may open a board picker.

Journey:
    scroll pin into view -> hover -> click Save
        -> [pick a board when the picker opens] -> confirm

Confirmation: the board picker is gone (immediately true when no picker was
offered) or the "Saved" toast is shown.

================================================================================
"""

from __future__ import annotations

from typing import Callable, Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.exceptions import ElementNotFoundError
from testsuites.ui_testing.framework.page_flow import (
    FlowResult,
    PageFlow,
    element_hidden,
    element_visible,
)
from testsuites.ui_testing.framework.smart_locator import Locator, LocatorSet, xpath_literal

from .common_locators import PIN_ITEMS


class PinPage(PageFlow):
    """Pin grid and board picker page object."""

    SAVE_BUTTON = LocatorSet.of(
        "Pin save button",
        Locator.xpath("//div[contains(@class, 'lIkAnG') and text()='Save']"),
        Locator.xpath("//button[.//div[text()='Save']]"),
        "button[aria-label*='Save']",
        Locator.xpath("//div[contains(text(), 'Save')]"),
    )
    BOARD_MODAL = LocatorSet.of(
        "Board picker",
        Locator.xpath("//div[@role='dialog']//h1"),
        Locator.xpath("//div[contains(@class, 'BoardPickerOverlay')]"),
    )
    FIRST_BOARD = LocatorSet.of(
        "First board",
        Locator.xpath("(//div[@role='dialog']//div[@role='button'])[1]"),
    )
    SAVED_TOAST = LocatorSet.of(
        "Saved toast",
        "div[data-test-id='toast']",
        Locator.xpath("//*[contains(text(), 'Saved to')]"),
    )

    # Seconds to wait for the board picker after clicking Save
    BOARD_PICKER_TIMEOUT = 5.0

    def _pin_count(self) -> int:
        return len(self.smart.find_all(PIN_ITEMS))

    def scroll_pin_into_view(self, index: int = 0) -> None:
        with self.navigating(f"Scroll pin #{index} into view"):
            self.actions.scroll_into_view(PIN_ITEMS.at(index), description=f"Pin #{index}")

    def hover_pin(self, index: int = 0) -> bool:
        """
        Hover a pin to reveal its Save button.

        Returns:
            True if the Save button showed up; a miss is logged, not raised
        """
        with self.navigating(f"Hover pin #{index}"):
            self.actions.hover(PIN_ITEMS.at(index), description=f"Pin #{index}")
            shown = self.smart.is_displayed(self.SAVE_BUTTON, timeout=self.policy.locator_timeout)
        if not shown:
            logger.warning("⚠️ Hover might not have revealed the Save button")
        return shown

    def click_save(self) -> None:
        with self.submitting("Click Save"):
            self.click(self.SAVE_BUTTON)

    # =========================================================================
    # Board selection (runs inside the destination-selection step)
    # =========================================================================

    def select_first_board(self) -> None:
        self.click(self.FIRST_BOARD)
        logger.info("✅ Selected first board")

    def select_board_by_name(self, board_name: str) -> None:
        """Pick ``board_name`` in the picker, falling back to the first board."""
        board = LocatorSet.of(
            f"Board '{board_name}'",
            Locator.xpath(
                f"//div[@role='dialog']//div[contains(text(), {xpath_literal(board_name)})]"
            ),
        )
        try:
            self.click(board)
        except ElementNotFoundError:
            logger.warning(f"⚠️ Board '{board_name}' not found, selecting first board instead")
            self.select_first_board()
            return
        logger.info(f"✅ Selected board: {board_name}")

    # =========================================================================
    # Journeys
    # =========================================================================

    def _save(self, index: int, choose: Callable[[], None], name: str) -> FlowResult:
        with self.journey(name):
            self.scroll_pin_into_view(index)
            self.hover_pin(index)
            self.click_save()
            self.select_destination_if_offered(
                self.BOARD_MODAL, choose, timeout=self.BOARD_PICKER_TIMEOUT
            )
            self.confirm(
                element_hidden(self.BOARD_MODAL),
                element_visible(self.SAVED_TOAST),
            )
        return self.last_result

    def save_first_pin(self) -> FlowResult:
        """Save the first pin, choosing the first board if asked."""
        return self._save(0, self.select_first_board, "Save first pin")

    def save_first_pin_to_board(self, board_name: str) -> FlowResult:
        return self._save(
            0,
            lambda: self.select_board_by_name(board_name),
            f"Save first pin to '{board_name}'",
        )

    def save_pin_by_index(self, index: int) -> FlowResult:
        """
        Save the ``index``-th pin of the grid.

        Raises:
            IndexError: Fewer than ``index + 1`` pins are shown
        """
        count = self._pin_count()
        if index >= count:
            raise IndexError(f"Pin index {index} out of bounds. Total pins: {count}")
        return self._save(index, self.select_first_board, f"Save pin #{index}")

    @allure.step("Verify pin save succeeded")
    def is_pin_save_successful(self, result: Optional[FlowResult] = None) -> bool:
        result = result or self.last_result
        success = result is not None and result.confirmed
        logger.info(f"Pin save successful: {success}")
        return success
