from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from turnwatch.models import NotYet, RescheduleAfter, TransientFailure, TurnReady
from turnwatch.retry import GIVE_UP_THRESHOLD, decide

_FAILURE_COUNTS = st.integers(min_value=0, max_value=50)
_INTERVALS = st.integers(min_value=1, max_value=1440)
_CAUSES = st.text(max_size=40)


@given(_FAILURE_COUNTS, _INTERVALS)
def test_successful_fetch_always_resets_failures(failure_count: int, interval: int) -> None:
    for outcome in (TurnReady(), NotYet()):
        _, failures = decide(outcome, failure_count, interval)
        assert failures == 0


@given(_FAILURE_COUNTS, _INTERVALS)
def test_not_yet_always_uses_configured_interval(failure_count: int, interval: int) -> None:
    decision, _ = decide(NotYet(), failure_count, interval)

    assert decision == RescheduleAfter(interval)


@given(st.integers(min_value=0, max_value=GIVE_UP_THRESHOLD - 1), _INTERVALS, _CAUSES)
def test_failures_below_threshold_retry_quickly_and_count_up(
    failure_count: int,
    interval: int,
    cause: str,
) -> None:
    decision, failures = decide(TransientFailure(cause), failure_count, interval)

    assert decision == RescheduleAfter(1)
    assert failures == failure_count + 1


@given(_FAILURE_COUNTS, _INTERVALS, _CAUSES)
def test_failure_counter_never_negative_nor_past_threshold(
    failure_count: int,
    interval: int,
    cause: str,
) -> None:
    _, failures = decide(TransientFailure(cause), failure_count, interval)

    assert 0 <= failures <= GIVE_UP_THRESHOLD


@given(_FAILURE_COUNTS, _INTERVALS)
def test_decision_is_deterministic(failure_count: int, interval: int) -> None:
    outcome = TransientFailure("store unavailable")

    assert decide(outcome, failure_count, interval) == decide(outcome, failure_count, interval)
