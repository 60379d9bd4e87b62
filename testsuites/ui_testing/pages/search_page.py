"""
================================================================================
Search Page Object
================================================================================

Header search and the search results grid.

A search is confirmed by the URL moving to the results route. Results are
then pins, a spelling suggestion, or a "no results" notice; all three count
as the search being handled gracefully.

================================================================================
"""

from __future__ import annotations

from typing import List, Optional

import allure
from loguru import logger
from playwright.sync_api import ElementHandle

from testsuites.ui_testing.framework.page_flow import FlowResult, PageFlow, url_contains
from testsuites.ui_testing.framework.smart_locator import Locator, LocatorSet

from .common_locators import PIN_ITEMS, SEARCH_BOX


class SearchPage(PageFlow):
    """Search page object."""

    RESULTS_URL_FRAGMENT = "search"

    NO_RESULTS = LocatorSet.of(
        "No results notice",
        Locator.xpath(
            "//*[contains(text(), 'No results') or contains(text(), 'no pins found')"
            " or contains(text(), 'Try another search')]"
        ),
    )
    SPELLING_SUGGESTION = LocatorSet.of(
        "Spelling suggestion",
        Locator.xpath("//*[contains(text(), 'Did you mean') or contains(text(), 'Try searching for')]"),
    )

    def enter_query(self, query: str) -> None:
        with self.field(f"Enter search query '{query}'"):
            self.type_text(SEARCH_BOX, query)

    def submit_search(self) -> None:
        with self.submitting("Submit search with Enter"):
            self.actions.press_key("Enter", SEARCH_BOX)

    def search(self, query: str, timeout: Optional[float] = None) -> FlowResult:
        """Type ``query`` into the header search and press Enter."""
        logger.info(f"🔍 Searching for: {query}")
        with self.journey(f"Search for '{query}'"):
            self.enter_query(query)
            self.submit_search()
            self.confirm(url_contains(self.RESULTS_URL_FRAGMENT), timeout=timeout)
        return self.last_result

    def navigate_home(self) -> None:
        """Go back to the home feed and wait for the search box."""
        with self.navigating("Navigate to home"):
            self.navigate_to("/")
            self.smart.resolve(SEARCH_BOX, condition="present")
        logger.info("✅ Navigated to home page")

    # =========================================================================
    # Results
    # =========================================================================

    def pins(self, timeout: Optional[float] = None) -> List[ElementHandle]:
        """All pins in the grid; empty when none show up."""
        return self.smart.find_all(PIN_ITEMS, timeout=timeout)

    def pin_count(self, timeout: Optional[float] = None) -> int:
        return len(self.pins(timeout=timeout))

    @allure.step("Verify pins are displayed")
    def are_pins_displayed(self, timeout: Optional[float] = None) -> bool:
        return self.pin_count(timeout=timeout) > 0

    def open_pin(self, index: int = 0) -> None:
        """
        Open the ``index``-th pin of the grid.

        Raises:
            IndexError: Fewer than ``index + 1`` pins are shown
        """
        with self.navigating(f"Open pin #{index}"):
            count = self.pin_count()
            if index >= count:
                raise IndexError(f"Pin index {index} out of bounds. Total pins: {count}")
            self.click(PIN_ITEMS.at(index), description=f"Pin #{index}")
        logger.info(f"✅ Opened pin at index: {index}")

    def is_no_results_displayed(self, timeout: float = 5.0) -> bool:
        return self.smart.is_displayed(self.NO_RESULTS, timeout=timeout)

    def is_spelling_suggestion_displayed(self, timeout: float = 5.0) -> bool:
        return self.smart.is_displayed(self.SPELLING_SUGGESTION, timeout=timeout)

    def is_search_results_page_loaded(self) -> bool:
        return self.RESULTS_URL_FRAGMENT in self.page.url

    def is_search_attempted(self) -> bool:
        """The URL moved to results, or at least away from the start page."""
        current = self.page.url
        return self.RESULTS_URL_FRAGMENT in current or current.rstrip("/") != self.base_url

    @allure.step("Verify search was handled gracefully")
    def is_search_handled_gracefully(self) -> bool:
        return (
            self.are_pins_displayed()
            or self.is_spelling_suggestion_displayed()
            or self.is_no_results_displayed()
        )
