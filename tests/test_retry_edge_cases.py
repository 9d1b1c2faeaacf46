"""Retry module edge case tests."""

from __future__ import annotations

import pytest

from turnwatch.errors import ErrorCode, TurnWatchError
from turnwatch.models import GiveUpAndStop, NotYet, RescheduleAfter, TransientFailure, TurnReady
from turnwatch.retry import DEFAULT_POLICY, RetryPolicy, decide


def test_default_policy_matches_module_constants() -> None:
    assert DEFAULT_POLICY == RetryPolicy(give_up_threshold=4, failure_retry_minutes=1)


def test_failure_count_above_threshold_still_gives_up() -> None:
    decision, failures = decide(TransientFailure(), 9, 5)

    assert decision == GiveUpAndStop()
    assert failures == 0


def test_failure_retry_ignores_long_configured_interval() -> None:
    decision, _ = decide(TransientFailure(), 0, 1440)

    assert decision == RescheduleAfter(1)


def test_not_yet_with_one_minute_interval() -> None:
    assert decide(NotYet(), 0, 1) == (RescheduleAfter(1), 0)


@pytest.mark.parametrize("configured_delay", [0, -5])
def test_non_positive_interval_is_rejected(configured_delay: int) -> None:
    with pytest.raises(TurnWatchError) as exc:
        decide(TurnReady(), 0, configured_delay)

    assert exc.value.code == ErrorCode.VALIDATION_ERROR
    assert "interval" in exc.value.message


def test_unknown_outcome_type_raises_type_error() -> None:
    with pytest.raises(TypeError):
        decide("turn-ready", 0, 5)  # type: ignore[arg-type]


def test_zero_threshold_gives_up_on_first_failure() -> None:
    policy = RetryPolicy(give_up_threshold=0)

    assert policy.decide(TransientFailure(), 0, 5) == (GiveUpAndStop(), 0)
