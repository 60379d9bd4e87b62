"""
================================================================================
UI Automation Exceptions
================================================================================

Error taxonomy shared by the resolver, the action executor and page flows.

    UIAutomationError
      +-- ElementNotFoundError      no locator in a set matched (fatal)
      +-- ElementStaleError         handle detached by a page mutation
      +-- ClickInterceptedError     click target obscured by another element
      +-- RetryExhaustedError       stale retries spent (fatal)
      +-- ElementNotVisibleError    scroll finished but target still hidden
      +-- FieldValueMismatchError   typed value did not stick
      +-- FlowStateError            illegal page-flow transition
      +-- ConfirmationTimeoutError  no post-submit signal (strict flows only)
      +-- ConfigurationError        config.yaml unreadable or invalid (config_loader)
      +-- TestDataError             scenario key or field missing (data_provider)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional, Sequence


class UIAutomationError(Exception):
    """Base exception for all UI automation failures."""
    pass


class ElementNotFoundError(UIAutomationError):
    """Raised when all locator strategies fail to find element."""

    def __init__(self, target: str, attempts: Optional[Sequence[str]] = None):
        self.target = target
        self.attempts = list(attempts or [])
        message = f"All locators failed for '{target}'"
        if self.attempts:
            message += ":\n" + "\n".join(f"  - {a}" for a in self.attempts)
        super().__init__(message)


class ElementStaleError(UIAutomationError):
    """Element handle no longer attached to the page."""
    pass


class ClickInterceptedError(UIAutomationError):
    """Another element would receive the click."""
    pass


class RetryExhaustedError(UIAutomationError):
    """Raised when an operation keeps hitting stale handles."""

    def __init__(self, target: str, operation: str, attempts: int):
        self.target = target
        self.operation = operation
        self.attempts = attempts
        super().__init__(
            f"Failed to {operation} '{target}' after {attempts} attempts "
            f"due to stale element"
        )


class ElementNotVisibleError(UIAutomationError):
    """Raised when an element is still not visible after scrolling to it."""
    pass


class FieldValueMismatchError(UIAutomationError):
    """Raised when an input does not hold the text that was typed."""

    def __init__(self, target: str, expected: str, actual: Optional[str]):
        self.target = target
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Field '{target}' holds {actual!r} after typing {expected!r}"
        )


class FlowStateError(UIAutomationError):
    """Raised on an illegal page-flow state transition."""
    pass


class ConfirmationTimeoutError(UIAutomationError):
    """Raised by strict flows when no confirmation signal appears."""
    pass


class ConfirmationTimeoutWarning(UserWarning):
    """Emitted when a submit completed but no confirmation signal appeared."""
    pass


__all__ = [
    "UIAutomationError",
    "ElementNotFoundError",
    "ElementStaleError",
    "ClickInterceptedError",
    "RetryExhaustedError",
    "ElementNotVisibleError",
    "FieldValueMismatchError",
    "FlowStateError",
    "ConfirmationTimeoutError",
    "ConfirmationTimeoutWarning",
]
