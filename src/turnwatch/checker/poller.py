"""Fetch the authoritative game state and compare the turn owner."""

from __future__ import annotations

import logging as py_logging
from typing import Protocol

from turnwatch.models import (
    FetchError,
    FetchResult,
    GameState,
    NotYet,
    PollOutcome,
    TransientFailure,
    TurnReady,
)

logger = py_logging.getLogger(__name__)


class GameFetcher(Protocol):
    def __call__(self, game_id: str) -> FetchResult: ...


class GameStatePoller:
    """Single fetch-and-compare step; retry decisions belong to the policy."""

    def __init__(self, fetcher: GameFetcher) -> None:
        self._fetcher = fetcher

    def poll(self, game_id: str, *, user_id: str) -> PollOutcome:
        try:
            result = self._fetcher(game_id)
        except Exception as exc:
            logger.warning("Game fetch raised game=%s error=%s", game_id, exc)
            return TransientFailure(cause=f"{type(exc).__name__}: {exc}")

        if isinstance(result, FetchError):
            logger.warning("Game fetch failed game=%s error=%s", game_id, result.message)
            return TransientFailure(cause=result.message)
        if not isinstance(result, GameState):
            logger.warning("Game fetch returned unexpected payload game=%s type=%s", game_id, type(result).__name__)
            return TransientFailure(cause=f"Unexpected fetch result: {type(result).__name__}")
        if result.game_id != game_id:
            logger.warning("Game fetch returned another game requested=%s received=%s", game_id, result.game_id)
            return TransientFailure(cause=f"Fetched game {result.game_id} instead of {game_id}")

        if result.current_player_id == user_id:
            logger.debug("Turn ready game=%s user=%s", game_id, user_id)
            return TurnReady()
        logger.debug("Turn pending game=%s current_player=%s", game_id, result.current_player_id)
        return NotYet()
