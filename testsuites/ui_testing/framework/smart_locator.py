"""
================================================================================
Smart Locator with Prioritised Fallback Resolution
================================================================================

Element location system with:
    - Immutable Locator / LocatorSet definitions declared by page objects
    - Ordered fallback resolution, first satisfiable locator wins
    - Per-locator and overall timeouts (WaitPolicy)
    - Usage analytics for maintenance insights (fallback health report)

Locator Priority Order (recommended when declaring a LocatorSet):
    1. data-test-id / id (most stable)
    2. aria-label / name attributes
    3. CSS structure
    4. Visible text
    5. XPath (last resort)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from loguru import logger
from playwright.sync_api import ElementHandle, Page
from playwright.sync_api import Error as PlaywrightError

from .exceptions import ElementNotFoundError
from .waits import Deadline, WaitPolicy, WaitTimeoutError, to_ms, wait_until


class LocatorStrategy(str, Enum):
    """How a Locator's selector string is interpreted."""
    ID = "id"
    CSS = "css"
    XPATH = "xpath"
    ATTRIBUTE = "attribute"
    TEXT = "text"


@dataclass(frozen=True)
class Locator:
    """
    One rule for finding an element.

    Attributes:
        selector: Selector body (id value, CSS, XPath, attribute value or text)
        strategy: LocatorStrategy used to interpret ``selector``
        attribute: Attribute name for ATTRIBUTE strategy
        nth: Optional zero-based index among matches
    """
    selector: str
    strategy: LocatorStrategy = LocatorStrategy.CSS
    attribute: Optional[str] = None
    nth: Optional[int] = None

    def __post_init__(self):
        if not self.selector:
            raise ValueError("Locator selector must not be empty")
        if self.strategy is LocatorStrategy.ATTRIBUTE and not self.attribute:
            raise ValueError("Attribute locators need an attribute name")

    @classmethod
    def css(cls, selector: str) -> "Locator":
        return cls(selector, LocatorStrategy.CSS)

    @classmethod
    def xpath(cls, selector: str) -> "Locator":
        return cls(selector, LocatorStrategy.XPATH)

    @classmethod
    def id(cls, element_id: str) -> "Locator":
        return cls(element_id, LocatorStrategy.ID)

    @classmethod
    def text(cls, text: str) -> "Locator":
        return cls(text, LocatorStrategy.TEXT)

    @classmethod
    def attr(cls, name: str, value: str) -> "Locator":
        return cls(value, LocatorStrategy.ATTRIBUTE, attribute=name)

    @classmethod
    def parse(cls, selector: str) -> "Locator":
        """Build a Locator from a bare string (XPath if it looks like one)."""
        if selector.startswith(("//", "(/", "./")):
            return cls.xpath(selector)
        return cls.css(selector)

    def at(self, index: int) -> "Locator":
        """Return a copy restricted to the ``index``-th match."""
        return replace(self, nth=index)

    def to_playwright(self) -> str:
        """Render as a Playwright selector string."""
        if self.strategy is LocatorStrategy.ID:
            rendered = f'[id="{self.selector}"]'
        elif self.strategy is LocatorStrategy.XPATH:
            rendered = f"xpath={self.selector}"
        elif self.strategy is LocatorStrategy.ATTRIBUTE:
            rendered = f'[{self.attribute}="{self.selector}"]'
        elif self.strategy is LocatorStrategy.TEXT:
            rendered = f"text={self.selector}"
        else:
            rendered = self.selector

        if self.nth is not None:
            rendered = f"{rendered} >> nth={self.nth}"
        return rendered

    def __str__(self) -> str:
        return self.to_playwright()


@dataclass(frozen=True)
class LocatorSet:
    """
    Prioritised alternatives for one logical UI target.

    Order is a behavioural contract: the first satisfiable locator wins.
    """
    name: str
    locators: Tuple[Locator, ...]

    def __post_init__(self):
        locators = tuple(self.locators)
        if not locators:
            raise ValueError(f"LocatorSet '{self.name}' needs at least one locator")
        object.__setattr__(self, "locators", locators)

    @classmethod
    def of(cls, name: str, *entries: Union[str, Locator]) -> "LocatorSet":
        """Build a set from Locators or bare selector strings."""
        return cls(
            name,
            tuple(e if isinstance(e, Locator) else Locator.parse(e) for e in entries),
        )

    @property
    def primary(self) -> Locator:
        return self.locators[0]

    def at(self, index: int) -> "LocatorSet":
        """Return the same alternatives restricted to the ``index``-th match."""
        return LocatorSet(
            f"{self.name}[{index}]",
            tuple(loc.at(index) for loc in self.locators),
        )

    def __iter__(self) -> Iterator[Locator]:
        return iter(self.locators)

    def __len__(self) -> int:
        return len(self.locators)


@dataclass
class LocatorHealth:
    """
    Tracks locator health and usage statistics.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_index: Position of the fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_index: Optional[int] = None
    fallback_selector: Optional[str] = None


# Resolution conditions understood by SmartLocator.resolve()
CONDITIONS = ("present", "visible", "clickable")


def only_visible(selector: str) -> str:
    """Narrow a rendered selector to its visible matches."""
    return f"{selector} >> visible=true"


class SmartLocator:
    """
    Resolver: evaluates a LocatorSet against the live page.

    Features:
        - Ordered fallback with short-circuit on first match
        - Per-locator timeout capped by the overall WaitPolicy timeout
        - Non-waiting visibility probes for assertions
        - Usage analytics for maintenance insights

    Usage:
        >>> smart = SmartLocator(page)
        >>> handle = smart.resolve(LoginPage.EMAIL_INPUT, condition="visible")
        >>> smart.is_displayed(LoginPage.ERROR_MESSAGE, timeout=3)
    """

    def __init__(
        self,
        page: Page,
        policy: Optional[WaitPolicy] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize SmartLocator with Playwright page.

        Args:
            page: Playwright Page object
            policy: Default WaitPolicy for resolutions
            clock: Monotonic clock, injectable for tests
        """
        self.page = page
        self.policy = policy or WaitPolicy()
        self._clock = clock
        self._health_records: List[LocatorHealth] = []
        self._fallback_used: Dict[str, LocatorHealth] = {}

    def sleep(self, seconds: float) -> None:
        """Pause while letting Playwright process browser events."""
        self.page.wait_for_timeout(to_ms(seconds))

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(
        self,
        locator_set: LocatorSet,
        condition: str = "visible",
        policy: Optional[WaitPolicy] = None,
    ) -> ElementHandle:
        """
        Locate element using smart fallback strategy.

        Tries each locator in order until one satisfies ``condition``.
        Records usage statistics for maintenance insights.

        Args:
            locator_set: Prioritised alternatives for the target
            condition: "present", "visible" or "clickable"
            policy: Override the default WaitPolicy

        Returns:
            ElementHandle for the found element

        Raises:
            ElementNotFoundError: When all strategies fail
        """
        if condition not in CONDITIONS:
            raise ValueError(f"Unknown resolution condition: {condition}")

        policy = policy or self.policy
        deadline = Deadline(policy.timeout, clock=self._clock)
        errors: List[str] = []

        for index, locator in enumerate(locator_set):
            selector = locator.to_playwright()
            if index > 0 and deadline.expired:
                errors.append(f"{selector} -> skipped, {policy.timeout}s budget spent")
                continue

            timeout = min(policy.locator_timeout, deadline.remaining) or policy.locator_timeout
            try:
                handle = self._wait_for(selector, condition, timeout)
            except PlaywrightError as e:
                errors.append(f"{selector} -> {str(e).splitlines()[0][:80]}")
                logger.debug(
                    f"Element '{locator_set.name}' not {condition} with: {selector}"
                )
                continue

            self._record(locator_set, index, selector)
            return handle

        logger.error(
            f"❌ All locators failed for '{locator_set.name}' ({condition})"
        )
        raise ElementNotFoundError(locator_set.name, errors)

    def _wait_for(self, selector: str, condition: str, timeout: float) -> ElementHandle:
        if condition == "present":
            locator = self.page.locator(selector).first
            state = "attached"
        else:
            locator = self.page.locator(only_visible(selector)).first
            state = "visible"
        locator.wait_for(state=state, timeout=to_ms(timeout))
        handle = locator.element_handle(timeout=to_ms(timeout))
        if condition == "clickable":
            handle.wait_for_element_state("enabled", timeout=to_ms(timeout))
        return handle

    def _record(self, locator_set: LocatorSet, index: int, selector: str) -> None:
        used_fallback = index > 0
        health = LocatorHealth(
            element_name=locator_set.name,
            primary_selector=locator_set.primary.to_playwright(),
            used_fallback=used_fallback,
            fallback_index=index if used_fallback else None,
            fallback_selector=selector if used_fallback else None,
        )
        self._health_records.append(health)

        if used_fallback:
            logger.warning(
                f"⚠️ Element '{locator_set.name}' used fallback #{index}: {selector}"
            )
            self._fallback_used[locator_set.name] = health
        else:
            logger.debug(f"✅ Element '{locator_set.name}' found: {selector}")

    # =========================================================================
    # Probes (non-fatal)
    # =========================================================================

    def visible_now(self, locator_set: LocatorSet) -> Optional[str]:
        """
        Return the selector of the first locator with a visible match, or None.

        Does not wait; every locator is checked in priority order. Hidden
        matches ahead of a visible one do not hide it.
        """
        for locator in locator_set:
            selector = locator.to_playwright()
            try:
                if self.page.locator(only_visible(selector)).first.is_visible():
                    return selector
            except PlaywrightError as e:
                logger.debug(f"Visibility probe failed for {selector}: {e}")
        return None

    def is_displayed(self, locator_set: LocatorSet, timeout: float = 2.0) -> bool:
        """
        Check if any locator in the set becomes visible within ``timeout``.

        Args:
            locator_set: Prioritised alternatives for the target
            timeout: Seconds to keep polling

        Returns:
            True if visible, False otherwise
        """
        try:
            self._poll(lambda: self.visible_now(locator_set), timeout, locator_set.name)
            return True
        except WaitTimeoutError:
            logger.debug(f"ℹ️ '{locator_set.name}' not displayed within {timeout}s")
            return False

    def first_displayed_text(self, locator_set: LocatorSet, timeout: float = 2.0) -> str:
        """
        Return the text of the first displayed match, or "" when none shows up.
        """
        try:
            selector = self._poll(
                lambda: self.visible_now(locator_set), timeout, locator_set.name
            )
        except WaitTimeoutError:
            logger.info(f"ℹ️ No '{locator_set.name}' displayed")
            return ""
        text = self.page.locator(only_visible(selector)).first.inner_text().strip()
        logger.info(f"'{locator_set.name}' text: {text}")
        return text

    def find_all(self, locator_set: LocatorSet, timeout: Optional[float] = None) -> List[ElementHandle]:
        """
        Return every match of the first locator that matches anything.

        Returns an empty list (with a warning) when nothing is present.
        """
        policy = self.policy if timeout is None else self.policy.with_timeout(timeout)
        deadline = Deadline(policy.timeout, clock=self._clock)

        for index, locator in enumerate(locator_set):
            if index > 0 and deadline.expired:
                break
            selector = locator.to_playwright()
            wait_s = min(policy.locator_timeout, deadline.remaining) or policy.locator_timeout
            try:
                self.page.locator(selector).first.wait_for(state="attached", timeout=to_ms(wait_s))
            except PlaywrightError:
                logger.debug(f"No '{locator_set.name}' present with: {selector}")
                continue
            handles = self.page.locator(selector).element_handles()
            if handles:
                self._record(locator_set, index, selector)
                logger.info(f"📌 Found {len(handles)} x '{locator_set.name}'")
                return handles

        logger.warning(f"⚠️ No '{locator_set.name}' found on the page")
        return []

    def _poll(self, predicate, timeout: float, description: str):
        policy = WaitPolicy(
            timeout=timeout,
            locator_timeout=timeout,
            poll_interval=min(self.policy.poll_interval, timeout),
        )
        return wait_until(
            predicate,
            policy,
            description=description,
            sleep=self.sleep,
            clock=self._clock,
        )

    # =========================================================================
    # Health reporting
    # =========================================================================

    @property
    def health_records(self) -> List[LocatorHealth]:
        return list(self._health_records)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Identifies targets whose primary locator failed (maintenance candidates).

        Returns:
            Formatted health report string
        """
        if not self._fallback_used:
            return "✅ All elements used primary locators. No maintenance needed."

        report_lines = [
            "⚠️ Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]

        for element_name, health in self._fallback_used.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: #{health.fallback_index} -> {health.fallback_selector}",
                "",
            ])

        return "\n".join(report_lines)


def xpath_literal(value: str) -> str:
    """Quote ``value`` for use inside an XPath expression."""
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    parts = value.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


__all__ = [
    "SmartLocator",
    "ElementNotFoundError",
    "Locator",
    "LocatorSet",
    "LocatorStrategy",
    "LocatorHealth",
    "xpath_literal",
]
