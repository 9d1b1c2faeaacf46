"""Retry/backoff decisions for recurring turn checks."""

from __future__ import annotations

from dataclasses import dataclass

from turnwatch.models import (
    GiveUpAndStop,
    NotifyAndStop,
    NotYet,
    PollOutcome,
    RescheduleAfter,
    ScheduleDecision,
    TransientFailure,
    TurnReady,
)
from turnwatch.errors import ErrorCode, TurnWatchError

GIVE_UP_THRESHOLD = 4
FAILURE_RETRY_MINUTES = 1


@dataclass(frozen=True)
class RetryPolicy:
    """Maps a poll outcome and the consecutive-failure count to the next step.

    Failures are retried after ``failure_retry_minutes`` regardless of the
    configured interval. Once ``give_up_threshold`` failures have accumulated
    the next failure stops the cycle and resets the counter, so a manually
    restarted cycle starts clean.
    """

    give_up_threshold: int = GIVE_UP_THRESHOLD
    failure_retry_minutes: int = FAILURE_RETRY_MINUTES

    def decide(
        self,
        outcome: PollOutcome,
        failure_count: int,
        configured_delay: int,
    ) -> tuple[ScheduleDecision, int]:
        if failure_count < 0:
            raise TurnWatchError(
                f"Invalid failure count: {failure_count}",
                code=ErrorCode.VALIDATION_ERROR,
                hint="Failure counts are never negative.",
            )
        if configured_delay < 1:
            raise TurnWatchError(
                f"Invalid check interval: {configured_delay}",
                code=ErrorCode.VALIDATION_ERROR,
                hint="Use an interval of at least one minute.",
            )

        if isinstance(outcome, TurnReady):
            return NotifyAndStop(), 0
        if isinstance(outcome, NotYet):
            return RescheduleAfter(configured_delay), 0
        if isinstance(outcome, TransientFailure):
            if failure_count < self.give_up_threshold:
                return RescheduleAfter(self.failure_retry_minutes), failure_count + 1
            return GiveUpAndStop(), 0
        raise TypeError(f"Unsupported poll outcome: {outcome!r}")


DEFAULT_POLICY = RetryPolicy()


def decide(
    outcome: PollOutcome,
    failure_count: int,
    configured_delay: int,
) -> tuple[ScheduleDecision, int]:
    return DEFAULT_POLICY.decide(outcome, failure_count, configured_delay)
