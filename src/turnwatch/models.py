"""Turn checker domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class OutcomeKind(str, Enum):
    TURN_READY = "turn-ready"
    NOT_YET = "not-yet"
    TRANSIENT_FAILURE = "transient-failure"


class DecisionKind(str, Enum):
    NOTIFY_AND_STOP = "notify-and-stop"
    RESCHEDULE_AFTER = "reschedule-after"
    GIVE_UP_AND_STOP = "give-up-and-stop"


@dataclass(frozen=True)
class GameState:
    game_id: str
    current_player_id: str


@dataclass(frozen=True)
class FetchError:
    message: str
    cause: BaseException | None = None


FetchResult = Union[GameState, FetchError]


@dataclass(frozen=True)
class TurnReady:
    kind: OutcomeKind = OutcomeKind.TURN_READY


@dataclass(frozen=True)
class NotYet:
    kind: OutcomeKind = OutcomeKind.NOT_YET


@dataclass(frozen=True)
class TransientFailure:
    cause: str = ""
    kind: OutcomeKind = OutcomeKind.TRANSIENT_FAILURE


PollOutcome = Union[TurnReady, NotYet, TransientFailure]


@dataclass(frozen=True)
class NotifyAndStop:
    kind: DecisionKind = DecisionKind.NOTIFY_AND_STOP


@dataclass(frozen=True)
class RescheduleAfter:
    minutes: int
    kind: DecisionKind = DecisionKind.RESCHEDULE_AFTER


@dataclass(frozen=True)
class GiveUpAndStop:
    kind: DecisionKind = DecisionKind.GIVE_UP_AND_STOP


ScheduleDecision = Union[NotifyAndStop, RescheduleAfter, GiveUpAndStop]
