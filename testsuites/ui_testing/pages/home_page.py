"""
================================================================================
Home Page Object
================================================================================

Landing page with the pin grid. Covers page load and the three ways a user
scrolls the feed (keyboard, script offset, element scroll).

================================================================================
"""

from __future__ import annotations

from urllib.parse import urlparse

import allure
from loguru import logger

from testsuites.ui_testing.framework.page_flow import PageFlow
from testsuites.ui_testing.framework.waits import WaitTimeoutError


class HomePage(PageFlow):
    """Home feed page object."""

    URL_PATH = "/"

    # Seconds to wait for the offset to grow after one key press
    SCROLL_STEP_TIMEOUT = 2.0

    def open(self) -> "HomePage":
        """Navigate to the home page."""
        with self.navigating("Open home page"):
            self.navigate()
            self.wait_for_page_load()
        return self

    @allure.step("Verify home page is loaded")
    def is_loaded(self) -> bool:
        """True when the browser is on the application's domain."""
        domain = urlparse(self.base_url).hostname or ""
        domain = domain[4:] if domain.startswith("www.") else domain
        loaded = bool(domain) and domain in self.page.url
        logger.info(f"Home page loaded: {loaded} ({self.page.url})")
        return loaded

    def scroll_position(self) -> int:
        """Current vertical scroll offset in pixels."""
        return self.scroll.position()

    def scroll_with_keyboard(self, times: int = 3, key: str = "PageDown") -> int:
        """
        Scroll the feed by pressing ``key`` repeatedly.

        After each press waits (bounded) for the offset to grow; a press that
        does not move the page is logged, not fatal.

        Returns:
            Number of presses that moved the page
        """
        moved = 0
        with self.navigating(f"Scroll with {key} x{times}"):
            for press in range(1, times + 1):
                before = self.scroll_position()
                self.actions.press_key(key)
                try:
                    self.wait_until(
                        lambda: self.scroll_position() > before,
                        timeout=self.SCROLL_STEP_TIMEOUT,
                        description=f"scroll offset to grow past {before}",
                    )
                except WaitTimeoutError:
                    logger.warning(f"⚠️ {key} #{press} did not move the page (offset {before})")
                    continue
                moved += 1
                logger.debug(f"{key} #{press}: offset {before} -> {self.scroll_position()}")
        return moved

    def scroll_with_script(self, pixels: int = 1000) -> int:
        """Scroll by ``pixels`` via script; returns the new offset."""
        with self.navigating(f"Scroll by {pixels}px"):
            before = self.scroll_position()
            self.scroll.scroll_by(0, pixels)
            try:
                self.wait_until(
                    lambda: self.scroll_position() != before,
                    timeout=self.SCROLL_STEP_TIMEOUT,
                    description="scroll offset to change",
                )
            except WaitTimeoutError:
                logger.warning(f"⚠️ Script scroll by {pixels}px did not move the page")
        return self.scroll_position()

    def did_scroll(self, initial_position: int) -> bool:
        current = self.scroll_position()
        logger.info(f"Scroll position: {initial_position} -> {current}")
        return current > initial_position
