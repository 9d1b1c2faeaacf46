"""Turn check cycle orchestration."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable
from datetime import datetime
from typing import Any, TextIO

from turnwatch.checker.activation import ActivationScheduler
from turnwatch.checker.notifications import NotificationSink
from turnwatch.checker.poller import GameFetcher, GameStatePoller
from turnwatch.config import TurnWatchConfig
from turnwatch.errors import ErrorCode, TurnWatchError
from turnwatch.logging import configure_from_config
from turnwatch.models import (
    GameState,
    GiveUpAndStop,
    NotifyAndStop,
    RescheduleAfter,
    ScheduleDecision,
)
from turnwatch.retry import RetryPolicy
from turnwatch.state import (
    CheckerState,
    FileStateStore,
    MemoryStateStore,
    StateStore,
    build_session,
)

logger = py_logging.getLogger(__name__)

# The first check ignores the configured interval.
FIRST_CHECK_MINUTES = 1


class TurnCheckScheduler:
    """Drives one turn check cycle from ``start_cycle`` to a terminal decision.

    Every activation is a single step that reads the persisted
    :class:`~turnwatch.state.CheckerState`, polls once, applies the retry
    policy and either arms exactly one further activation or ends the cycle.
    Nothing is carried in memory between activations, so the host process may
    be restarted in between.
    """

    def __init__(
        self,
        *,
        poller: GameStatePoller,
        notifications: NotificationSink,
        activations: ActivationScheduler,
        store: StateStore | None = None,
        policy: RetryPolicy | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._poller = poller
        self._notifications = notifications
        self._activations = activations
        self._store = store if store is not None else MemoryStateStore()
        self._policy = policy or RetryPolicy()
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: TurnWatchConfig,
        *,
        fetcher: GameFetcher,
        notifications: NotificationSink,
        activations: ActivationScheduler,
        policy: RetryPolicy | None = None,
        log_stream: TextIO | None = None,
    ) -> TurnCheckScheduler:
        configure_from_config(config, log_stream)
        store: StateStore
        if config.state_path:
            store = FileStateStore(config.state_path)
        else:
            store = MemoryStateStore()
        return cls(
            poller=GameStatePoller(fetcher),
            notifications=notifications,
            activations=activations,
            store=store,
            policy=policy,
        )

    @property
    def state(self) -> CheckerState | None:
        return self._store.load()

    def start_cycle(
        self,
        game: GameState,
        *,
        user_id: str,
        interval_minutes: int,
        persistent_enabled: bool,
    ) -> bool:
        """Start tracking ``game`` for ``user_id``; returns whether polling began.

        When the user already holds the turn the notification is shown right
        away and no cycle is started.
        """
        if game.current_player_id == user_id:
            self._supersede_previous()
            logger.info("Turn already ready at start game=%s user=%s", game.game_id, user_id)
            self._notify(self._notifications.show_turn_ready)
            return False

        session = build_session(
            game_id=game.game_id,
            user_id=user_id,
            check_interval_minutes=interval_minutes,
            persistent_status_enabled=persistent_enabled,
        )
        self._supersede_previous()
        self._store.save(CheckerState(session=session, failure_count=0))
        logger.info(
            "Started turn check cycle=%s game=%s interval=%s persistent=%s",
            session.cycle_id,
            session.game_id,
            session.check_interval_minutes,
            session.persistent_status_enabled,
        )
        if session.persistent_status_enabled:
            self._notify(
                self._notifications.show_persistent_status,
                None,
                session.check_interval_minutes,
            )
        self._activations.schedule_wake(FIRST_CHECK_MINUTES, True, cycle_id=session.cycle_id)
        return True

    def start_cycle_from_config(self, game: GameState, config: TurnWatchConfig) -> bool:
        if not config.user_id:
            raise TurnWatchError(
                "No user id configured for turn checks.",
                code=ErrorCode.CONFIG_ERROR,
                hint="Set user_id in the config file or TURNWATCH_USER_ID.",
            )
        return self.start_cycle(
            game,
            user_id=config.user_id,
            interval_minutes=config.check_interval_minutes,
            persistent_enabled=config.persistent_notification_enabled,
        )

    def on_wake(self, cycle_id: str | None = None) -> ScheduleDecision | None:
        state = self._store.load()
        if state is None:
            logger.info("Ignoring activation without an active cycle")
            return None
        session = state.session
        if cycle_id is not None and cycle_id != session.cycle_id:
            logger.info("Ignoring stale activation cycle=%s active=%s", cycle_id, session.cycle_id)
            return None

        outcome = self._poller.poll(session.game_id, user_id=session.user_id)

        # start_cycle or stop_cycle may have run while the fetch was in flight.
        current = self._store.load()
        if current is None or current.session.cycle_id != session.cycle_id:
            logger.info(
                "Dropping result of superseded activation cycle=%s active=%s",
                session.cycle_id,
                current.session.cycle_id if current is not None else None,
            )
            return None

        decision, failure_count = self._policy.decide(
            outcome,
            state.failure_count,
            session.check_interval_minutes,
        )
        logger.debug(
            "Turn check cycle=%s outcome=%s decision=%s failures=%s->%s",
            session.cycle_id,
            outcome.kind.value,
            decision.kind.value,
            state.failure_count,
            failure_count,
        )

        if isinstance(decision, NotifyAndStop):
            self._store.clear()
            logger.info("Turn ready cycle=%s game=%s", session.cycle_id, session.game_id)
            self._notify(self._notifications.show_turn_ready)
            self._notify(self._notifications.clear_persistent_status)
        elif isinstance(decision, RescheduleAfter):
            self._store.save(state.model_copy(update={"failure_count": failure_count}))
            if session.persistent_status_enabled:
                self._notify(
                    self._notifications.show_persistent_status,
                    self._clock(),
                    decision.minutes,
                )
            self._activations.schedule_wake(decision.minutes, True, cycle_id=session.cycle_id)
        elif isinstance(decision, GiveUpAndStop):
            self._store.clear()
            logger.error(
                "Giving up turn checks cycle=%s game=%s after %s consecutive failures",
                session.cycle_id,
                session.game_id,
                state.failure_count + 1,
            )
            self._notify(self._notifications.show_error)
            self._notify(self._notifications.clear_persistent_status)
        return decision

    def stop_cycle(self) -> bool:
        self._activations.cancel_all()
        state = self._store.load()
        self._store.clear()
        if state is None:
            return False
        logger.info("Stopped turn check cycle=%s", state.session.cycle_id)
        self._notify(self._notifications.clear_persistent_status)
        return True

    def _supersede_previous(self) -> None:
        self._activations.cancel_all()
        previous = self._store.load()
        if previous is None:
            return
        self._store.clear()
        logger.info("Superseded turn check cycle=%s", previous.session.cycle_id)
        self._notify(self._notifications.clear_persistent_status)

    def _notify(self, action: Callable[..., object], *args: Any) -> None:
        try:
            action(*args)
        except Exception:
            logger.exception("Notification sink failed action=%s", getattr(action, "__name__", action))
