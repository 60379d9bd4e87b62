import pytest

from testsuites.ui_testing.framework.waits import (
    Deadline,
    WaitPolicy,
    WaitTimeoutError,
    to_ms,
    wait_until,
)
from testsuites.unit.fakes import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


def test_returns_first_truthy_result(clock):
    results = iter([None, "", "https://www.pinterest.com/search/"])

    value = wait_until(lambda: next(results), WaitPolicy(timeout=5), sleep=clock.advance, clock=clock)

    assert value == "https://www.pinterest.com/search/"


def test_times_out_after_policy_timeout(clock):
    start = clock()
    checks = []

    with pytest.raises(WaitTimeoutError, match="search results URL"):
        wait_until(
            lambda: checks.append(1),
            WaitPolicy(timeout=2, poll_interval=0.5),
            description="search results URL",
            sleep=clock.advance,
            clock=clock,
        )

    assert clock() - start == pytest.approx(2.0)
    assert len(checks) == 5


def test_predicate_checked_once_even_without_budget(clock):
    checks = []

    with pytest.raises(WaitTimeoutError):
        wait_until(
            lambda: checks.append(1),
            WaitPolicy(timeout=0.001, poll_interval=0.001),
            sleep=lambda s: clock.advance(1),
            clock=clock,
        )

    assert len(checks) >= 1


def test_policy_validation():
    with pytest.raises(ValueError):
        WaitPolicy(timeout=0)
    with pytest.raises(ValueError):
        WaitPolicy(poll_interval=0)

    assert WaitPolicy(timeout=20).with_timeout(3).timeout == 3


def test_deadline(clock):
    deadline = Deadline(5, clock=clock)
    clock.advance(2)
    assert deadline.remaining == pytest.approx(3)
    clock.advance(4)
    assert deadline.remaining == 0.0
    assert deadline.expired


def test_to_ms():
    assert to_ms(1.5) == 1500.0
