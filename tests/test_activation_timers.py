from __future__ import annotations

import threading

from turnwatch.checker.activation import TimerActivationScheduler
from turnwatch.checker.notifications import LoggingNotificationSink
from turnwatch.checker.poller import GameStatePoller
from turnwatch.checker.service import TurnCheckScheduler
from turnwatch.models import GameState, NotifyAndStop


def test_real_timer_drives_cycle_to_turn_ready() -> None:
    finished = threading.Event()
    decisions: list[object] = []
    activations = TimerActivationScheduler(seconds_per_minute=0.01)
    sink = LoggingNotificationSink(lambda _: None)
    scheduler = TurnCheckScheduler(
        poller=GameStatePoller(lambda game_id: GameState(game_id=game_id, current_player_id="u2")),
        notifications=sink,
        activations=activations,
    )

    def _wake(cycle_id: str) -> None:
        decisions.append(scheduler.on_wake(cycle_id))
        finished.set()

    activations.bind(_wake)
    scheduler.start_cycle(
        GameState(game_id="g1", current_player_id="u1"),
        user_id="u2",
        interval_minutes=5,
        persistent_enabled=True,
    )

    assert finished.wait(timeout=5)
    assert decisions == [NotifyAndStop()]
    assert scheduler.state is None
