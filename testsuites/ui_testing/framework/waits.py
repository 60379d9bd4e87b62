# ================================================================================
# Wait Policy Module
# ================================================================================
#
# Bounded poll-until-condition waits for UI state that the browser updates
# asynchronously (URL changes, scroll offsets, modal appearance).
#
# Key Features:
#   - WaitPolicy: overall timeout, per-locator timeout and poll interval
#   - wait_until: poll a predicate until it holds or the policy times out
#   - Pluggable sleeper so Playwright can keep pumping its event loop
#
# Usage:
#   wait_until(lambda: "search" in page.url, WaitPolicy(timeout=10),
#              description="search results URL")
#
# ================================================================================

import time
from dataclasses import dataclass, replace
from typing import Callable, Optional, TypeVar

from loguru import logger


T = TypeVar("T")


@dataclass(frozen=True)
class WaitPolicy:
    """
    Timing policy for waits.

    Attributes:
        timeout: Overall budget in seconds for one wait or resolution
        locator_timeout: Budget in seconds for a single locator attempt
        poll_interval: Seconds between predicate checks
    """
    timeout: float = 20.0
    locator_timeout: float = 5.0
    poll_interval: float = 0.5

    def __post_init__(self):
        if self.timeout <= 0 or self.locator_timeout <= 0:
            raise ValueError("Wait timeouts must be positive")
        if self.poll_interval <= 0:
            raise ValueError("Poll interval must be positive")

    def with_timeout(self, timeout: float) -> "WaitPolicy":
        """Return a copy with a different overall timeout."""
        return replace(self, timeout=timeout)


class WaitTimeoutError(Exception):
    """Raised when a wait operation times out."""
    pass


class Deadline:
    """Monotonic deadline helper."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at = clock() + seconds

    @property
    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining <= 0.0


def to_ms(seconds: float) -> float:
    """Playwright timeouts are expressed in milliseconds."""
    return seconds * 1000.0


def wait_until(
    predicate: Callable[[], T],
    policy: Optional[WaitPolicy] = None,
    description: str = "condition",
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """
    Poll ``predicate`` until it returns a truthy value.

    The predicate is always evaluated at least once, so a zero-remaining
    deadline still reports the current state.

    Args:
        predicate: Zero-argument callable; a truthy result ends the wait
        policy: WaitPolicy controlling timeout and poll interval
        description: Human-readable description for logging
        sleep: Sleeper receiving seconds (pages pass ``wait_for_timeout``)
        clock: Monotonic clock, injectable for tests

    Returns:
        The first truthy predicate result

    Raises:
        WaitTimeoutError: If the predicate never held within the timeout
    """
    policy = policy or WaitPolicy()
    deadline = Deadline(policy.timeout, clock=clock)
    attempt = 0

    while True:
        attempt += 1
        result = predicate()
        if result:
            logger.debug(f"Wait satisfied after {attempt} checks: {description}")
            return result

        if deadline.expired:
            message = (
                f"Timeout after {policy.timeout:.1f}s ({attempt} checks) "
                f"waiting for: {description}"
            )
            logger.debug(message)
            raise WaitTimeoutError(message)

        sleep(min(policy.poll_interval, deadline.remaining))


__all__ = [
    "WaitPolicy",
    "WaitTimeoutError",
    "Deadline",
    "to_ms",
    "wait_until",
]
