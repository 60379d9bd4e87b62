"""
In-memory stand-ins for the slice of the Playwright sync API the framework
uses, so resolver, executor and page-flow logic can be tested without a
browser.

Elements are registered under the exact Playwright selector a Locator
renders to (``LoginPage.EMAIL_INPUT.primary.to_playwright()``), without any
``>> nth=`` or ``>> visible=`` suffix; the locator applies those. Failed waits
advance the fake clock by their timeout, like a real wait would.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from testsuites.ui_testing.framework.element_actions import (
    CLEAR_VALUE_JS,
    FORCE_CLICK_JS,
    SCROLL_INTO_VIEW_JS,
    SELECT_ALL,
)

STALE_MESSAGE = "Element is not attached to the DOM"
INTERCEPT_MESSAGE = "<div class=\"overlay\"> intercepts pointer events"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeElement:
    """A DOM element with just enough state for the executor."""

    def __init__(
        self,
        text: str = "",
        value: str = "",
        visible: bool = True,
        enabled: bool = True,
        intercepted: bool = False,
        stale_failures: int = 0,
        forced_failures: int = 0,
        visible_on_scroll: bool = False,
        max_length: Optional[int] = None,
        error: Optional[str] = None,
        on_click: Optional[Callable[[], None]] = None,
        on_key: Optional[Callable[[str], None]] = None,
    ):
        self.text = text
        self.value = value
        self.visible = visible
        self.enabled = enabled
        self.intercepted = intercepted
        self.stale_failures = stale_failures
        self.forced_failures = forced_failures
        self.visible_on_scroll = visible_on_scroll
        self.max_length = max_length
        self.error = error
        self.on_click = on_click
        self.on_key = on_key

        self.clicks = 0
        self.forced_clicks = 0
        self.hovers = 0
        self.forced_hovers = 0
        self.scrolled = False
        self.focused = False
        self.pressed: List[str] = []
        self.fills: List[str] = []
        self._selected = False

    def _touch(self) -> None:
        if self.stale_failures > 0:
            self.stale_failures -= 1
            raise PlaywrightError(STALE_MESSAGE)
        if self.error:
            raise PlaywrightError(self.error)

    def click(self, timeout: Optional[float] = None, **kwargs) -> None:
        self._touch()
        if self.intercepted:
            raise PlaywrightError(f"Element click intercepted: {INTERCEPT_MESSAGE}")
        self.clicks += 1
        if self.on_click:
            self.on_click()

    def hover(self, force: bool = False, timeout: Optional[float] = None) -> None:
        self._touch()
        if self.intercepted and not force:
            raise PlaywrightError(INTERCEPT_MESSAGE)
        if force:
            if self.forced_failures > 0:
                self.forced_failures -= 1
                raise PlaywrightError(STALE_MESSAGE)
            self.forced_hovers += 1
        else:
            self.hovers += 1

    def evaluate(self, script: str, arg=None):
        self._touch()
        if script == FORCE_CLICK_JS:
            self.forced_clicks += 1
            if self.on_click:
                self.on_click()
        elif script == SCROLL_INTO_VIEW_JS:
            self.scrolled = True
            if self.visible_on_scroll:
                self.visible = True
        elif script == CLEAR_VALUE_JS:
            self.value = ""
        return None

    def focus(self) -> None:
        self._touch()
        self.focused = True

    def press(self, key: str, **kwargs) -> None:
        self._touch()
        self.pressed.append(key)
        if key == SELECT_ALL:
            self._selected = True
        elif key == "Backspace":
            self.value = "" if self._selected else self.value[:-1]
            self._selected = False
        if self.on_key:
            self.on_key(key)

    def fill(self, text: str, timeout: Optional[float] = None) -> None:
        self._touch()
        self.fills.append(text)
        self.value = text if self.max_length is None else text[: self.max_length]

    def input_value(self, **kwargs) -> str:
        return self.value

    def inner_text(self, **kwargs) -> str:
        self._touch()
        return self.text

    def is_visible(self) -> bool:
        return self.visible

    def wait_for_element_state(self, state: str, timeout: Optional[float] = None) -> None:
        if state == "visible" and not self.visible:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded: element is not visible")
        if state == "enabled" and not self.enabled:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded: element is not enabled")


class FakeLocator:
    """Selector plus its ``nth=`` and ``visible=`` filters, applied in order."""

    def __init__(self, page: "FakePage", selector: str, filters: Tuple[str, ...] = ()):
        self.page = page
        self.selector = selector
        self.filters = filters

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.page, self.selector, self.filters + ("nth=0",))

    def _matches(self) -> List[FakeElement]:
        elements = list(self.page.elements.get(self.selector, []))
        for item in self.filters:
            name, _, value = item.partition("=")
            if name == "visible":
                elements = [e for e in elements if e.visible == (value == "true")]
            elif name == "nth":
                index = int(value)
                elements = elements[index:index + 1]
        return elements

    def _match(self) -> Optional[FakeElement]:
        matches = self._matches()
        return matches[0] if matches else None

    def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        self.page.waits.append((self.selector, state, timeout))
        element = self._match()
        if element is not None and (state == "attached" or element.visible):
            return
        self.page.advance((timeout or 0) / 1000.0)
        raise PlaywrightTimeoutError(
            f"Timeout {timeout}ms exceeded.\nwaiting for locator('{self.selector}') to be {state}"
        )

    def element_handle(self, timeout: Optional[float] = None) -> FakeElement:
        element = self._match()
        if element is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")
        return element

    def element_handles(self) -> List[FakeElement]:
        return self._matches()

    def is_visible(self) -> bool:
        element = self._match()
        return bool(element and element.visible)

    def inner_text(self) -> str:
        return self._match().inner_text()


class FakeKeyboard:
    def __init__(self, page: "FakePage"):
        self.page = page
        self.pressed: List[str] = []

    def press(self, key: str) -> None:
        self.pressed.append(key)
        if key == "PageDown":
            self.page.scroll_y += self.page.page_down_step


class FakeContext:
    def __init__(self, **options):
        self.options = options
        self.cookies_cleared = 0
        self.default_timeout: Optional[float] = None
        self.navigation_timeout: Optional[float] = None
        self.closed = False

    def clear_cookies(self) -> None:
        self.cookies_cleared += 1

    def set_default_timeout(self, timeout: float) -> None:
        self.default_timeout = timeout

    def set_default_navigation_timeout(self, timeout: float) -> None:
        self.navigation_timeout = timeout

    def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self):
        self.contexts: List[FakeContext] = []
        self.closed = False

    def new_context(self, **options) -> FakeContext:
        context = FakeContext(**options)
        self.contexts.append(context)
        return context

    def close(self) -> None:
        self.closed = True


class FakePage:
    """Page double: selector registry, URL, scroll offset and a fake clock."""

    def __init__(self, clock: Optional[FakeClock] = None, url: str = "about:blank"):
        self.clock = clock or FakeClock()
        self.url = url
        self.elements: Dict[str, List[FakeElement]] = {}
        self.waits: List[Tuple[str, str, Optional[float]]] = []
        self.keyboard = FakeKeyboard(self)
        self.context = FakeContext()
        self.handlers: Dict[str, List[Callable]] = {}
        self.scroll_y = 0
        self.page_down_step = 600
        self.visited: List[str] = []
        self.screenshots: List[Optional[str]] = []
        self.storage_cleared = 0
        self._scheduled: List[Tuple[float, Callable[[], None]]] = []

    # -- test setup ------------------------------------------------------------

    def add(self, selector: str, element: Optional[FakeElement] = None, **kwargs) -> FakeElement:
        element = element or FakeElement(**kwargs)
        self.elements.setdefault(selector, []).append(element)
        return element

    def remove(self, selector: str) -> None:
        self.elements.pop(selector, None)

    def at(self, delay: float, action: Callable[[], None]) -> None:
        """Run ``action`` once the clock has moved ``delay`` seconds on."""
        self._scheduled.append((self.clock() + delay, action))

    def advance(self, seconds: float) -> None:
        self.clock.advance(seconds)
        due = [item for item in self._scheduled if item[0] <= self.clock()]
        self._scheduled = [item for item in self._scheduled if item[0] > self.clock()]
        for _, action in due:
            action()

    def emit(self, event: str, payload) -> None:
        for handler in self.handlers.get(event, []):
            handler(payload)

    # -- Playwright surface ----------------------------------------------------

    def locator(self, selector: str) -> FakeLocator:
        base, *filters = selector.split(" >> ")
        return FakeLocator(self, base, tuple(filters))

    def wait_for_timeout(self, timeout: float) -> None:
        self.advance(timeout / 1000.0)

    def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        return None

    def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.visited.append(url)
        self.url = url

    def on(self, event: str, handler: Callable) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        self.screenshots.append(path)
        return b"\x89PNG\r\n\x1a\n"

    def evaluate(self, script: str, arg=None):
        if "pageYOffset" in script:
            return self.scroll_y
        if "localStorage" in script:
            self.storage_cleared += 1
            return None
        match = re.search(r"window\.scroll(By|To)\((-?\d+), (-?\d+)\)", script)
        if match:
            dy = int(match.group(3))
            self.scroll_y = self.scroll_y + dy if match.group(1) == "By" else dy
            self.scroll_y = max(self.scroll_y, 0)
        return None


class FakeResponse:
    def __init__(self, url: str, status: int):
        self.url = url
        self.status = status


def selector_of(locator_set, index: int = 0) -> str:
    """Playwright selector of the ``index``-th alternative of a LocatorSet."""
    return locator_set.locators[index].to_playwright()
