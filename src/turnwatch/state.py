"""Persisted turn-check cycle state shared between activations."""

from __future__ import annotations

import logging as py_logging
import os
import threading
import uuid
from contextlib import suppress
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from turnwatch.errors import ErrorCode, TurnWatchError

logger = py_logging.getLogger(__name__)

DEFAULT_STATE_PATH = Path("~/.local/state/turnwatch/state.json")


def _new_cycle_id() -> str:
    return uuid.uuid4().hex


class TrackedSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    game_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    check_interval_minutes: int = Field(ge=1)
    persistent_status_enabled: bool = True
    cycle_id: str = Field(default_factory=_new_cycle_id, min_length=1)


class CheckerState(BaseModel):
    model_config = ConfigDict(frozen=True)

    session: TrackedSession
    failure_count: int = Field(default=0, ge=0)


def build_session(
    *,
    game_id: str,
    user_id: str,
    check_interval_minutes: int,
    persistent_status_enabled: bool,
) -> TrackedSession:
    try:
        return TrackedSession(
            game_id=game_id,
            user_id=user_id,
            check_interval_minutes=check_interval_minutes,
            persistent_status_enabled=persistent_status_enabled,
        )
    except ValidationError as exc:
        raise TurnWatchError(
            "Invalid turn check session.",
            code=ErrorCode.VALIDATION_ERROR,
            hint=f"{exc.error_count()} invalid field(s): "
            + ", ".join(str(err["loc"][0]) for err in exc.errors()),
        ) from exc


class StateStore(Protocol):
    def load(self) -> CheckerState | None: ...

    def save(self, state: CheckerState) -> None: ...

    def clear(self) -> None: ...


class MemoryStateStore:
    """Lock-guarded cell for checkers that live inside a single process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: CheckerState | None = None

    def load(self) -> CheckerState | None:
        with self._lock:
            return self._state

    def save(self, state: CheckerState) -> None:
        with self._lock:
            self._state = state

    def clear(self) -> None:
        with self._lock:
            self._state = None


class FileStateStore:
    """JSON file store that survives process restarts between activations.

    Writes go through a temporary sibling file and ``os.replace`` so a reader
    never observes a partially written record. A corrupt or unreadable file
    loads as "no active cycle".
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path).expanduser() if path is not None else DEFAULT_STATE_PATH.expanduser()
        self._lock = threading.Lock()

    def load(self) -> CheckerState | None:
        with self._lock:
            if not self.path.exists():
                return None
            try:
                payload = self.path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Unable to read checker state path=%s error=%s", self.path, exc)
                return None
            try:
                return CheckerState.model_validate_json(payload)
            except ValidationError as exc:
                logger.warning(
                    "Discarding corrupt checker state path=%s errors=%s",
                    self.path,
                    exc.error_count(),
                )
                return None

    def save(self, state: CheckerState) -> None:
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                temp_path = self.path.with_name(self.path.name + ".tmp")
                temp_path.write_text(state.model_dump_json(), encoding="utf-8")
                with suppress(OSError):
                    temp_path.chmod(0o600)
                os.replace(temp_path, self.path)
            except OSError as exc:
                raise TurnWatchError(
                    f"Unable to persist checker state: {self.path}",
                    code=ErrorCode.STATE_ERROR,
                    hint=str(exc),
                ) from exc
            logger.debug(
                "Saved checker state cycle=%s failures=%s",
                state.session.cycle_id,
                state.failure_count,
            )

    def clear(self) -> None:
        with self._lock:
            with suppress(FileNotFoundError):
                self.path.unlink()
            logger.debug("Cleared checker state path=%s", self.path)
