"""
Locator sets shared by several page objects.

Ordered most-stable first; see SmartLocator for the priority conventions.
"""

from testsuites.ui_testing.framework.smart_locator import Locator, LocatorSet


# Header search input, only rendered for signed-in users
SEARCH_BOX = LocatorSet.of(
    "Search box",
    "input[data-test-id='search-box-input']",
    "input[aria-label='Search']",
    "input[placeholder*='Search']",
    Locator.xpath("//*[@id='searchBoxContainer']/div/div/div[2]/input"),
)

PIN_ITEMS = LocatorSet.of(
    "Pin",
    "div[data-test-id='pin']",
    "div[data-grid-item='true']",
    "div[role='listitem']",
)
