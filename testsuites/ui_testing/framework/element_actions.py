# ================================================================================
# Element Actions Module
# ================================================================================
#
# Action Executor: performs click / type / scroll / hover on elements resolved
# through SmartLocator, recovering from the two transient failure classes a
# dynamic single-page app produces.
#
# Key Features:
#   - Intercepted click -> immediate forced script click (no retry consumed)
#   - Stale handle -> re-resolve, bounded by RetryConfig.max_attempts
#   - Idempotent typing: double clear + value verification
#   - Scroll-into-view with explicit visibility confirmation
#   - Allure step integration, secrets masked in reports
#
# ================================================================================

from functools import wraps
from typing import Callable, Optional

import allure
from loguru import logger
from playwright.sync_api import ElementHandle, Page
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from autotest_tools.common import mask_secret

from .exceptions import (
    ClickInterceptedError,
    ElementNotVisibleError,
    ElementStaleError,
    FieldValueMismatchError,
    RetryExhaustedError,
    UIAutomationError,
)
from .smart_locator import LocatorSet, SmartLocator
from .waits import to_ms


# Playwright error fragments
STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "node is detached",
    "element handle is disposed",
)
INTERCEPT_MARKERS = (
    "intercepts pointer events",
    "element click intercepted",
    "other element would receive the click",
)

SCROLL_INTO_VIEW_JS = "el => el.scrollIntoView({block: 'center', inline: 'nearest'})"
CLEAR_VALUE_JS = (
    "el => { el.value = '';"
    " el.dispatchEvent(new Event('input', {bubbles: true})); }"
)
FORCE_CLICK_JS = "el => el.click()"
SELECT_ALL = "ControlOrMeta+a"


def is_stale_error(error: BaseException) -> bool:
    """True if a driver error means the handle left the DOM."""
    message = str(error).lower()
    return any(marker in message for marker in STALE_MARKERS)


def is_intercepted_error(error: BaseException) -> bool:
    """True if a driver error means another element received the click."""
    message = str(error).lower()
    return any(marker in message for marker in INTERCEPT_MARKERS)


def classify_error(error: PlaywrightError) -> Optional[UIAutomationError]:
    """Map a recoverable driver error to the taxonomy, None if not recoverable."""
    if is_stale_error(error):
        return ElementStaleError(str(error))
    if is_intercepted_error(error):
        return ClickInterceptedError(str(error))
    return None


class RetryConfig:
    """Configuration for stale-element retry behavior."""

    def __init__(self, max_attempts: int = 3):
        """
        Initialize retry configuration.

        Args:
            max_attempts: Maximum number of resolve-and-act attempts
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts


def with_stale_retry(operation: str):
    """
    Decorator re-running an element action while its handle goes stale.

    The wrapped method must resolve its element itself, so every attempt works
    on a fresh handle. Other errors propagate on the first occurrence.

    Args:
        operation: Verb used in logs and in RetryExhaustedError
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(self, locator_set: LocatorSet, *args, **kwargs):
            max_attempts = self.retry_config.max_attempts
            last_exception = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(self, locator_set, *args, **kwargs)
                except ElementStaleError as e:
                    last_exception = e
                    if attempt < max_attempts:
                        logger.warning(
                            f"Stale element detected for '{locator_set.name}'. "
                            f"Retry attempt: {attempt}/{max_attempts}"
                        )

            logger.error(
                f"All {max_attempts} attempts to {operation} '{locator_set.name}' "
                f"hit a stale element"
            )
            raise RetryExhaustedError(locator_set.name, operation, max_attempts) from last_exception

        return wrapper
    return decorator


class ElementActions:
    """
    Action Executor wrapping Playwright element operations.

    Every public action resolves its target through the SmartLocator, so no
    handle outlives the operation that created it.

    Example:
        actions = ElementActions(page, SmartLocator(page))
        actions.click(LoginPage.SUBMIT_BUTTON, description="Submit button")
        actions.type_text(LoginPage.PASSWORD_INPUT, "secret", sensitive=True)
    """

    def __init__(
        self,
        page: Page,
        resolver: SmartLocator,
        retry_config: Optional[RetryConfig] = None,
        action_timeout: float = 5.0,
    ):
        """
        Initialize ElementActions.

        Args:
            page: Playwright Page object
            resolver: SmartLocator used for every resolution
            retry_config: Stale retry budget
            action_timeout: Seconds Playwright may spend on a single action
        """
        self.page = page
        self.resolver = resolver
        self.retry_config = retry_config or RetryConfig()
        self.action_timeout = action_timeout

    # =========================================================================
    # Click
    # =========================================================================

    @allure.step("Click element: {description}")
    def click(self, locator_set: LocatorSet, description: str = "") -> None:
        """
        Click an element, falling back to a script click when obscured.

        Raises:
            ElementNotFoundError: No locator matched
            RetryExhaustedError: Handle went stale on every attempt
        """
        self._click(locator_set)
        logger.info(f"✅ Clicked: {description or locator_set.name}")

    @with_stale_retry("click")
    def _click(self, locator_set: LocatorSet) -> None:
        handle = self.resolver.resolve(locator_set, condition="clickable")
        try:
            handle.click(timeout=to_ms(self.action_timeout))
        except PlaywrightError as e:
            classified = classify_error(e)
            if not isinstance(classified, ClickInterceptedError):
                if classified is not None:
                    raise classified from e
                raise
            logger.warning(
                f"Click intercepted on '{locator_set.name}', using script click: "
                f"{str(classified).splitlines()[0][:120]}"
            )
            self._force_click(handle)

    def _force_click(self, handle: ElementHandle) -> None:
        try:
            handle.evaluate(FORCE_CLICK_JS)
        except PlaywrightError as e:
            if is_stale_error(e):
                raise ElementStaleError(str(e)) from e
            raise

    # =========================================================================
    # Typing
    # =========================================================================

    @allure.step("Type text: {description}")
    def type_text(
        self,
        locator_set: LocatorSet,
        text: str,
        description: str = "",
        sensitive: bool = False,
    ) -> None:
        """
        Replace the content of an input with ``text``.

        The field is cleared twice (script reset, then select-all + Backspace)
        before filling, and the resulting value is verified.

        Args:
            locator_set: Target input
            text: Text to enter
            description: Human-readable description for reporting
            sensitive: Mask the value in logs

        Raises:
            FieldValueMismatchError: The field does not hold ``text`` afterwards
        """
        shown = mask_secret(text) if sensitive else text
        logger.info(f"Typing into {description or locator_set.name}: '{shown}'")
        self._type_text(locator_set, text, sensitive)

    @with_stale_retry("type into")
    def _type_text(self, locator_set: LocatorSet, text: str, sensitive: bool) -> None:
        handle = self.resolver.resolve(locator_set, condition="visible")
        try:
            self._scroll_handle(handle, locator_set)
            handle.focus()
            handle.evaluate(CLEAR_VALUE_JS)
            handle.press(SELECT_ALL)
            handle.press("Backspace")
            handle.fill(text, timeout=to_ms(self.action_timeout))
            actual = handle.input_value()
        except PlaywrightError as e:
            if is_stale_error(e):
                raise ElementStaleError(str(e)) from e
            raise

        if actual != text:
            if sensitive:
                raise FieldValueMismatchError(
                    locator_set.name, mask_secret(text), mask_secret(actual or "")
                )
            raise FieldValueMismatchError(locator_set.name, text, actual)

    # =========================================================================
    # Scrolling / hovering
    # =========================================================================

    @allure.step("Scroll into view: {description}")
    def scroll_into_view(self, locator_set: LocatorSet, description: str = "") -> None:
        """
        Scroll an element to the viewport centre and confirm it is visible.

        Raises:
            ElementNotVisibleError: Still hidden after scrolling
        """
        self._scroll_into_view(locator_set)

    @with_stale_retry("scroll to")
    def _scroll_into_view(self, locator_set: LocatorSet) -> None:
        handle = self.resolver.resolve(locator_set, condition="present")
        try:
            self._scroll_handle(handle, locator_set)
        except PlaywrightError as e:
            if is_stale_error(e):
                raise ElementStaleError(str(e)) from e
            raise

    def _scroll_handle(self, handle: ElementHandle, locator_set: LocatorSet) -> None:
        handle.evaluate(SCROLL_INTO_VIEW_JS)
        try:
            handle.wait_for_element_state(
                "visible", timeout=to_ms(self.resolver.policy.locator_timeout)
            )
        except PlaywrightTimeoutError as e:
            raise ElementNotVisibleError(
                f"'{locator_set.name}' is not visible after scrolling into view"
            ) from e
        if not handle.is_visible():
            raise ElementNotVisibleError(
                f"'{locator_set.name}' is not visible after scrolling into view"
            )
        logger.debug(f"Scrolled into view: {locator_set.name}")

    @allure.step("Hover element: {description}")
    def hover(self, locator_set: LocatorSet, description: str = "") -> None:
        """Hover over an element (reveals hover-only controls)."""
        self._hover(locator_set)
        logger.info(f"Hovered over: {description or locator_set.name}")

    @with_stale_retry("hover over")
    def _hover(self, locator_set: LocatorSet) -> None:
        handle = self.resolver.resolve(locator_set, condition="visible")
        try:
            handle.hover(timeout=to_ms(self.action_timeout))
        except PlaywrightError as e:
            classified = classify_error(e)
            if not isinstance(classified, ClickInterceptedError):
                if classified is not None:
                    raise classified from e
                raise
            logger.warning(f"Hover intercepted on '{locator_set.name}', forcing it")
            try:
                handle.hover(force=True, timeout=to_ms(self.action_timeout))
            except PlaywrightError as forced:
                if is_stale_error(forced):
                    raise ElementStaleError(str(forced)) from forced
                raise

    # =========================================================================
    # Keyboard
    # =========================================================================

    @allure.step("Press key: {key}")
    def press_key(self, key: str, locator_set: Optional[LocatorSet] = None) -> None:
        """
        Press a keyboard key.

        Args:
            key: Key to press (e.g., "Enter", "PageDown", "Escape")
            locator_set: Optional element that receives the key press
        """
        if locator_set is None:
            self.page.keyboard.press(key)
        else:
            self._press_on(locator_set, key)
        logger.debug(f"Pressed key: {key}")

    @with_stale_retry("press a key on")
    def _press_on(self, locator_set: LocatorSet, key: str) -> None:
        handle = self.resolver.resolve(locator_set, condition="visible")
        try:
            handle.press(key)
        except PlaywrightError as e:
            if is_stale_error(e):
                raise ElementStaleError(str(e)) from e
            raise

    # =========================================================================
    # Reading
    # =========================================================================

    def get_text(self, locator_set: LocatorSet) -> str:
        """Get the visible text of an element."""
        text = self._read(locator_set, "inner_text")
        logger.debug(f"Got text from {locator_set.name}: '{text}'")
        return text

    def get_value(self, locator_set: LocatorSet) -> str:
        """Get the current value of an input."""
        value = self._read(locator_set, "input_value")
        logger.debug(f"Got value from {locator_set.name}: '{value}'")
        return value

    @with_stale_retry("read")
    def _read(self, locator_set: LocatorSet, method: str) -> str:
        handle = self.resolver.resolve(locator_set, condition="visible")
        try:
            return getattr(handle, method)()
        except PlaywrightError as e:
            if is_stale_error(e):
                raise ElementStaleError(str(e)) from e
            raise


class ScrollActions:
    """Utility class for window scroll operations."""

    SCROLL_POSITION_JS = "() => window.pageYOffset || document.documentElement.scrollTop"

    def __init__(self, page: Page):
        self.page = page

    def position(self) -> int:
        """Current vertical scroll offset in pixels."""
        return int(self.page.evaluate(self.SCROLL_POSITION_JS) or 0)

    @allure.step("Scroll by offset: ({dx}, {dy})")
    def scroll_by(self, dx: int = 0, dy: int = 0) -> None:
        self.page.evaluate(f"window.scrollBy({dx}, {dy})")


__all__ = [
    "ElementActions",
    "ScrollActions",
    "RetryConfig",
    "with_stale_retry",
    "is_stale_error",
    "is_intercepted_error",
    "classify_error",
]
