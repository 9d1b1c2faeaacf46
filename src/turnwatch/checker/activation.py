"""One-shot activation arming for the turn checker."""

from __future__ import annotations

import logging as py_logging
import threading
from collections.abc import Callable
from typing import Protocol

from turnwatch.errors import ErrorCode, TurnWatchError

logger = py_logging.getLogger(__name__)

WORK_TAG = "TURNWATCH_TURN_CHECKER"
DEFAULT_CONNECTIVITY_RETRY_SECONDS = 30.0

WakeCallback = Callable[[str], object]


class ActivationScheduler(Protocol):
    def schedule_wake(self, after_minutes: int, require_connectivity: bool, *, cycle_id: str) -> None: ...

    def cancel_all(self) -> None: ...


class Timer(Protocol):
    daemon: bool

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[..., Timer]


class TimerActivationScheduler:
    """In-process scheduler backed by ``threading.Timer``.

    At most one timer is armed at a time; arming again cancels the previous
    one. A wake that requires connectivity is deferred while ``is_connected``
    reports no network and probed again every ``connectivity_retry_seconds``.
    """

    def __init__(
        self,
        on_wake: WakeCallback | None = None,
        *,
        is_connected: Callable[[], bool] | None = None,
        connectivity_retry_seconds: float = DEFAULT_CONNECTIVITY_RETRY_SECONDS,
        seconds_per_minute: float = 60.0,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._on_wake = on_wake
        self._is_connected = is_connected or (lambda: True)
        self._connectivity_retry_seconds = connectivity_retry_seconds
        self._seconds_per_minute = seconds_per_minute
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Timer | None = None
        self._generation = 0

    def bind(self, on_wake: WakeCallback) -> None:
        self._on_wake = on_wake

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule_wake(self, after_minutes: int, require_connectivity: bool, *, cycle_id: str) -> None:
        if after_minutes < 0:
            raise TurnWatchError(
                f"Invalid activation delay: {after_minutes}",
                code=ErrorCode.VALIDATION_ERROR,
                hint="Activation delays are whole minutes from now.",
            )
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            self._arm_locked(
                after_minutes * self._seconds_per_minute,
                cycle_id,
                require_connectivity,
                self._generation,
            )
        logger.debug(
            "Armed activation tag=%s cycle=%s after_minutes=%s require_connectivity=%s",
            WORK_TAG,
            cycle_id,
            after_minutes,
            require_connectivity,
        )

    def cancel_all(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1
        logger.debug("Cancelled pending activations tag=%s", WORK_TAG)

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm_locked(
        self,
        delay_seconds: float,
        cycle_id: str,
        require_connectivity: bool,
        generation: int,
    ) -> None:
        timer = self._timer_factory(
            delay_seconds,
            self._fire,
            args=(cycle_id, require_connectivity, generation),
        )
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self, cycle_id: str, require_connectivity: bool, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
        connected = not require_connectivity or self._is_connected()
        with self._lock:
            if generation != self._generation:
                return
            if not connected:
                logger.debug("Deferring activation cycle=%s until connectivity returns", cycle_id)
                self._arm_locked(self._connectivity_retry_seconds, cycle_id, require_connectivity, generation)
                return
            self._timer = None
            callback = self._on_wake

        if callback is None:
            logger.warning("Activation fired without a wake handler cycle=%s", cycle_id)
            return
        try:
            callback(cycle_id)
        except Exception:
            logger.exception("Turn check activation failed cycle=%s", cycle_id)
