import pytest
from playwright.sync_api import Error as PlaywrightError

from testsuites.ui_testing.framework.element_actions import (
    ElementActions,
    RetryConfig,
    ScrollActions,
    classify_error,
)
from testsuites.ui_testing.framework.exceptions import (
    ClickInterceptedError,
    ElementNotFoundError,
    ElementNotVisibleError,
    ElementStaleError,
    FieldValueMismatchError,
    RetryExhaustedError,
)
from testsuites.ui_testing.framework.smart_locator import Locator, LocatorSet, SmartLocator
from testsuites.ui_testing.framework.waits import WaitPolicy
from testsuites.unit.fakes import (
    INTERCEPT_MESSAGE,
    STALE_MESSAGE,
    FakeClock,
    FakePage,
    selector_of,
)


TARGET = LocatorSet.of("Target", Locator.id("target"))
SELECTOR = selector_of(TARGET)


@pytest.fixture
def page():
    return FakePage(FakeClock())


@pytest.fixture
def actions(page):
    resolver = SmartLocator(page, WaitPolicy(timeout=4, locator_timeout=1), clock=page.clock)
    return ElementActions(page, resolver, RetryConfig(max_attempts=3))


def resolutions(page):
    return len(page.waits)


class TestClick:
    def test_click(self, page, actions):
        element = page.add(SELECTOR)

        actions.click(TARGET)

        assert element.clicks == 1
        assert element.forced_clicks == 0

    def test_intercepted_click_falls_back_to_script_click(self, page, actions):
        element = page.add(SELECTOR, intercepted=True)

        actions.click(TARGET)

        assert element.clicks == 0
        assert element.forced_clicks == 1
        assert resolutions(page) == 1

    def test_stale_handle_is_re_resolved(self, page, actions):
        element = page.add(SELECTOR, stale_failures=2)

        actions.click(TARGET)

        assert element.clicks == 1
        assert resolutions(page) == 3

    def test_retry_exhausted_after_exactly_budget_attempts(self, page, actions):
        element = page.add(SELECTOR, stale_failures=10)

        with pytest.raises(RetryExhaustedError) as exc_info:
            actions.click(TARGET)

        assert exc_info.value.attempts == 3
        assert exc_info.value.operation == "click"
        assert isinstance(exc_info.value.__cause__, ElementStaleError)
        assert resolutions(page) == 3
        assert element.stale_failures == 7

    def test_retry_budget_is_configurable(self, page):
        resolver = SmartLocator(page, WaitPolicy(timeout=4, locator_timeout=1), clock=page.clock)
        actions = ElementActions(page, resolver, RetryConfig(max_attempts=1))
        page.add(SELECTOR, stale_failures=1)

        with pytest.raises(RetryExhaustedError):
            actions.click(TARGET)
        assert resolutions(page) == 1

    def test_other_driver_errors_propagate_immediately(self, page, actions):
        page.add(SELECTOR, error="Target page, context or browser has been closed")

        with pytest.raises(PlaywrightError):
            actions.click(TARGET)
        assert resolutions(page) == 1

    def test_missing_element(self, actions):
        with pytest.raises(ElementNotFoundError):
            actions.click(TARGET)

    def test_invalid_retry_budget(self):
        with pytest.raises(ValueError):
            RetryConfig(max_attempts=0)


class TestTypeText:
    def test_type_replaces_existing_value(self, page, actions):
        element = page.add(SELECTOR, value="previous text")

        actions.type_text(TARGET, "home decor")

        assert element.value == "home decor"
        assert element.scrolled and element.focused
        assert element.pressed[:2] == ["ControlOrMeta+a", "Backspace"]

    def test_type_is_idempotent(self, page, actions):
        element = page.add(SELECTOR)

        actions.type_text(TARGET, "home decor")
        actions.type_text(TARGET, "home decor")

        assert element.value == "home decor"
        assert element.fills == ["home decor", "home decor"]

    def test_type_empty_clears_field(self, page, actions):
        element = page.add(SELECTOR, value="old")

        actions.type_text(TARGET, "")

        assert element.value == ""

    def test_value_mismatch(self, page, actions):
        page.add(SELECTOR, max_length=4)

        with pytest.raises(FieldValueMismatchError) as exc_info:
            actions.type_text(TARGET, "abcdefgh")

        assert exc_info.value.actual == "abcd"

    def test_value_mismatch_masks_sensitive_values(self, page, actions):
        page.add(SELECTOR, max_length=4)

        with pytest.raises(FieldValueMismatchError) as exc_info:
            actions.type_text(TARGET, "SuperSecret1", sensitive=True)

        assert "SuperSecret1" not in str(exc_info.value)
        assert "Supe" not in str(exc_info.value)

    def test_stale_while_typing_is_retried(self, page, actions):
        element = page.add(SELECTOR, stale_failures=1)

        actions.type_text(TARGET, "Asha")

        assert element.value == "Asha"
        assert resolutions(page) == 2


class TestScrollAndHover:
    def test_scroll_then_visible(self, page, actions):
        element = page.add(SELECTOR, visible=False, visible_on_scroll=True)

        actions.scroll_into_view(TARGET)

        assert element.scrolled
        assert element.visible

    def test_still_hidden_after_scroll(self, page, actions):
        page.add(SELECTOR, visible=False)

        with pytest.raises(ElementNotVisibleError):
            actions.scroll_into_view(TARGET)

    def test_hover(self, page, actions):
        element = page.add(SELECTOR)

        actions.hover(TARGET)

        assert element.hovers == 1

    def test_intercepted_hover_is_forced(self, page, actions):
        element = page.add(SELECTOR, intercepted=True)

        actions.hover(TARGET)

        assert element.forced_hovers == 1

    def test_stale_forced_hover_is_re_resolved(self, page, actions):
        element = page.add(SELECTOR, intercepted=True, forced_failures=1)

        actions.hover(TARGET)

        assert element.forced_hovers == 1
        assert resolutions(page) == 2

    def test_forced_hover_stale_every_time_exhausts_retries(self, page, actions):
        element = page.add(SELECTOR, intercepted=True, forced_failures=5)

        with pytest.raises(RetryExhaustedError) as exc_info:
            actions.hover(TARGET)

        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.__cause__, ElementStaleError)
        assert element.forced_hovers == 0
        assert element.forced_failures == 2


class TestKeysAndReads:
    def test_press_key_on_page(self, page, actions):
        actions.press_key("PageDown")

        assert page.keyboard.pressed == ["PageDown"]

    def test_press_key_on_element(self, page, actions):
        element = page.add(SELECTOR)

        actions.press_key("Enter", TARGET)

        assert element.pressed == ["Enter"]

    def test_reads(self, page, actions):
        page.add(SELECTOR, text="Log in", value="qa@example.com")

        assert actions.get_text(TARGET) == "Log in"
        assert actions.get_value(TARGET) == "qa@example.com"

    def test_scroll_actions(self, page):
        scroll = ScrollActions(page)

        scroll.scroll_by(0, 1200)
        assert scroll.position() == 1200
        scroll.scroll_by(0, -400)
        assert scroll.position() == 800


class TestClassifyError:
    def test_stale(self):
        assert isinstance(classify_error(PlaywrightError(STALE_MESSAGE)), ElementStaleError)

    def test_intercepted(self):
        assert isinstance(classify_error(PlaywrightError(INTERCEPT_MESSAGE)), ClickInterceptedError)

    def test_unrecoverable(self):
        assert classify_error(PlaywrightError("net::ERR_CONNECTION_REFUSED")) is None
