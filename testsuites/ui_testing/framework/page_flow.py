"""
================================================================================
Page Flow
================================================================================

State machine shared by all page objects. A user journey is a run:

    START -> NAVIGATING -> FIELD_INTERACTION* -> SUBMITTING
          -> [DESTINATION_SELECTION] -> CONFIRMED | UNCONFIRMED | FAILED

Steps are context managers that double as Allure steps; an exception inside
any step moves the run to FAILED and propagates. A run is CONFIRMED only when
an explicit post-submit signal is observed.

Usage:
    class SearchPage(PageFlow):
        def search(self, query: str) -> FlowResult:
            with self.journey(f"Search for '{query}'"):
                with self.field("Enter query"):
                    self.type_text(self.SEARCH_BOX, query)
                with self.submitting("Submit search"):
                    self.actions.press_key("Enter", self.SEARCH_BOX)
                self.confirm(url_contains("search"))
            return self.last_result

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import warnings
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterator, List, Optional

import allure
from loguru import logger

from .exceptions import ConfirmationTimeoutError, ConfirmationTimeoutWarning, FlowStateError
from .page_base import BasePage
from .smart_locator import LocatorSet
from .waits import WaitTimeoutError


class FlowState(str, Enum):
    """States of a page-flow run."""
    START = "start"
    NAVIGATING = "navigating"
    FIELD_INTERACTION = "field_interaction"
    SUBMITTING = "submitting"
    DESTINATION_SELECTION = "destination_selection"
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES: FrozenSet[FlowState] = frozenset({
    FlowState.CONFIRMED,
    FlowState.UNCONFIRMED,
    FlowState.FAILED,
})

# FAILED is reachable from every state and handled separately
TRANSITIONS: Dict[FlowState, FrozenSet[FlowState]] = {
    FlowState.START: frozenset({
        FlowState.NAVIGATING,
        FlowState.FIELD_INTERACTION,
        FlowState.SUBMITTING,
    }),
    FlowState.NAVIGATING: frozenset({
        FlowState.NAVIGATING,
        FlowState.FIELD_INTERACTION,
        FlowState.SUBMITTING,
    }),
    FlowState.FIELD_INTERACTION: frozenset({
        FlowState.FIELD_INTERACTION,
        FlowState.SUBMITTING,
    }),
    FlowState.SUBMITTING: frozenset({
        FlowState.DESTINATION_SELECTION,
        FlowState.CONFIRMED,
        FlowState.UNCONFIRMED,
    }),
    FlowState.DESTINATION_SELECTION: frozenset({
        FlowState.CONFIRMED,
        FlowState.UNCONFIRMED,
    }),
    FlowState.CONFIRMED: frozenset(),
    FlowState.UNCONFIRMED: frozenset(),
    FlowState.FAILED: frozenset(),
}

# Steps a page object may start outside a journey
STEP_STATES: FrozenSet[FlowState] = frozenset({
    FlowState.NAVIGATING,
    FlowState.FIELD_INTERACTION,
    FlowState.SUBMITTING,
})


# =============================================================================
# Confirmation Signals
# =============================================================================

@dataclass(frozen=True)
class ConfirmationSignal:
    """A named, non-waiting check evaluated against a page flow."""
    description: str
    check: Callable[["PageFlow"], bool]

    def __call__(self, flow: "PageFlow") -> bool:
        return bool(self.check(flow))


def _normalize_url(url: str) -> str:
    return url.rstrip("/")


def url_contains(fragment: str) -> ConfirmationSignal:
    return ConfirmationSignal(
        f"URL contains '{fragment}'",
        lambda flow: fragment in flow.page.url,
    )


def url_not_contains(fragment: str) -> ConfirmationSignal:
    return ConfirmationSignal(
        f"URL no longer contains '{fragment}'",
        lambda flow: fragment not in flow.page.url,
    )


def url_is_one_of(*urls: str) -> ConfirmationSignal:
    expected = {_normalize_url(u) for u in urls}
    return ConfirmationSignal(
        f"URL is one of {sorted(expected)}",
        lambda flow: _normalize_url(flow.page.url) in expected,
    )


def element_visible(locator_set: LocatorSet) -> ConfirmationSignal:
    return ConfirmationSignal(
        f"'{locator_set.name}' visible",
        lambda flow: flow.smart.visible_now(locator_set) is not None,
    )


def element_hidden(locator_set: LocatorSet) -> ConfirmationSignal:
    return ConfirmationSignal(
        f"'{locator_set.name}' hidden",
        lambda flow: flow.smart.visible_now(locator_set) is None,
    )


# =============================================================================
# Flow
# =============================================================================

@dataclass
class FlowResult:
    """Outcome of one page-flow run."""
    name: str
    state: FlowState
    history: List[FlowState] = field(default_factory=list)
    signal: Optional[str] = None
    destination_selected: bool = False

    @property
    def confirmed(self) -> bool:
        return self.state is FlowState.CONFIRMED


class PageFlow(BasePage):
    """
    Page object base class driving the flow state machine.

    Outside a journey each public step method is independently callable: a
    step that cannot follow the current state starts a new run. Inside a
    journey transitions are enforced and an illegal one raises FlowStateError.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._flow_name = self.__class__.__name__
        self._state = FlowState.START
        self._history: List[FlowState] = [FlowState.START]
        self._in_journey = False
        self._signal: Optional[str] = None
        self._destination_selected = False
        self.last_result: Optional[FlowResult] = None

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def history(self) -> List[FlowState]:
        return list(self._history)

    def begin(self, name: Optional[str] = None) -> None:
        """Start a new run from START."""
        self._flow_name = name or self.__class__.__name__
        self._state = FlowState.START
        self._history = [FlowState.START]
        self._signal = None
        self._destination_selected = False
        logger.debug(f"▶️ Flow started: {self._flow_name}")

    def result(self) -> FlowResult:
        return FlowResult(
            name=self._flow_name,
            state=self._state,
            history=list(self._history),
            signal=self._signal,
            destination_selected=self._destination_selected,
        )

    # =========================================================================
    # Transitions
    # =========================================================================

    def _transition(self, target: FlowState) -> None:
        current = self._state
        if target not in TRANSITIONS[current]:
            if self._in_journey or target not in STEP_STATES:
                raise FlowStateError(
                    f"{self._flow_name}: illegal transition "
                    f"{current.value} -> {target.value}"
                )
            logger.debug(
                f"{self.__class__.__name__}: standalone {target.value} step "
                f"after {current.value}, starting a new run"
            )
            self.begin()
            current = self._state

        self._state = target
        self._history.append(target)
        logger.debug(f"{self._flow_name}: {current.value} -> {target.value}")

    def _fail(self, where: str) -> None:
        if self._state is FlowState.FAILED:
            return
        logger.error(f"❌ {self._flow_name} failed during {self._state.value}: {where}")
        self._state = FlowState.FAILED
        self._history.append(FlowState.FAILED)

    # =========================================================================
    # Journey and Steps
    # =========================================================================

    @contextmanager
    def journey(self, name: str) -> Iterator["PageFlow"]:
        """
        Run a full user journey as one flow run.

        The run result is stored in ``last_result`` whether or not the journey
        raised.
        """
        self.begin(name)
        self._in_journey = True
        try:
            with allure.step(name):
                yield self
        except Exception:
            self._fail(name)
            raise
        finally:
            self._in_journey = False
            self.last_result = self.result()
            logger.info(f"🏁 {name}: {self._state.value}")

    @contextmanager
    def _step(self, state: FlowState, title: str) -> Iterator[None]:
        self._transition(state)
        with allure.step(title):
            try:
                yield
            except Exception:
                self._fail(title)
                raise

    def navigating(self, title: str):
        return self._step(FlowState.NAVIGATING, title)

    def field(self, title: str):
        return self._step(FlowState.FIELD_INTERACTION, title)

    def submitting(self, title: str):
        return self._step(FlowState.SUBMITTING, title)

    # =========================================================================
    # Post-submit
    # =========================================================================

    def select_destination_if_offered(
        self,
        modal: LocatorSet,
        choose: Callable[[], Any],
        timeout: float = 3.0,
    ) -> bool:
        """
        Handle an optional destination picker shown after submitting.

        Args:
            modal: LocatorSet identifying the picker
            choose: Callable that picks a destination inside the picker
            timeout: Seconds to wait for the picker to appear

        Returns:
            True if a picker was shown and handled, False if none appeared
        """
        if self._state is not FlowState.SUBMITTING:
            raise FlowStateError(
                f"{self._flow_name}: destination selection requires submitting, "
                f"not {self._state.value}"
            )

        if not self.smart.is_displayed(modal, timeout=timeout):
            logger.info(f"ℹ️ No '{modal.name}' offered, completed directly")
            return False

        self._transition(FlowState.DESTINATION_SELECTION)
        title = f"Select destination in {modal.name}"
        with allure.step(title):
            try:
                choose()
            except Exception:
                self._fail(title)
                raise
        self._destination_selected = True
        return True

    def confirm(
        self,
        *signals: ConfirmationSignal,
        timeout: Optional[float] = None,
        strict: bool = False,
    ) -> bool:
        """
        Wait for any post-submit confirmation signal.

        Args:
            *signals: Signals checked on every poll, in order
            timeout: Seconds to wait (defaults to the explicit wait)
            strict: Raise instead of ending UNCONFIRMED

        Returns:
            True if CONFIRMED, False if UNCONFIRMED

        Raises:
            FlowStateError: Nothing was submitted
            ConfirmationTimeoutError: ``strict`` and no signal appeared
        """
        if not signals:
            raise ValueError("confirm() needs at least one signal")
        if self._state not in (FlowState.SUBMITTING, FlowState.DESTINATION_SELECTION):
            raise FlowStateError(
                f"{self._flow_name}: cannot confirm from {self._state.value}"
            )

        timeout = timeout or self.policy.timeout
        description = " or ".join(s.description for s in signals)

        with allure.step(f"Confirm: {description}"):
            try:
                matched = self.wait_until(
                    lambda: next((s for s in signals if s(self)), None),
                    timeout=timeout,
                    description=description,
                )
            except WaitTimeoutError as e:
                message = (
                    f"{self._flow_name}: no confirmation within {timeout}s "
                    f"({description})"
                )
                if strict:
                    self._fail(message)
                    raise ConfirmationTimeoutError(message) from e
                logger.warning(f"⚠️ {message}")
                warnings.warn(message, ConfirmationTimeoutWarning, stacklevel=2)
                self._transition(FlowState.UNCONFIRMED)
                return False

        self._signal = matched.description
        self._transition(FlowState.CONFIRMED)
        logger.info(f"✅ {self._flow_name} confirmed: {matched.description}")
        return True


__all__ = [
    "FlowState",
    "FlowResult",
    "PageFlow",
    "ConfirmationSignal",
    "TERMINAL_STATES",
    "TRANSITIONS",
    "url_contains",
    "url_not_contains",
    "url_is_one_of",
    "element_visible",
    "element_hidden",
]
