from __future__ import annotations

import logging as py_logging

import pytest

from turnwatch.checker.poller import GameStatePoller
from turnwatch.models import FetchError, GameState, NotYet, TransientFailure, TurnReady


class _StubFetcher:
    def __init__(self, result: object) -> None:
        self.result = result
        self.calls: list[str] = []

    def __call__(self, game_id: str) -> object:
        self.calls.append(game_id)
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result


def test_poll_reports_turn_ready_for_tracked_user() -> None:
    fetcher = _StubFetcher(GameState(game_id="g1", current_player_id="u2"))
    poller = GameStatePoller(fetcher)

    assert poller.poll("g1", user_id="u2") == TurnReady()
    assert fetcher.calls == ["g1"]


def test_poll_reports_not_yet_for_other_player() -> None:
    poller = GameStatePoller(_StubFetcher(GameState(game_id="g1", current_player_id="u1")))

    assert poller.poll("g1", user_id="u2") == NotYet()


def test_poll_compares_player_ids_exactly() -> None:
    poller = GameStatePoller(_StubFetcher(GameState(game_id="g1", current_player_id="U2 ")))

    assert poller.poll("g1", user_id="u2") == NotYet()


def test_fetch_error_result_becomes_transient_failure() -> None:
    poller = GameStatePoller(_StubFetcher(FetchError("store unavailable")))

    outcome = poller.poll("g1", user_id="u2")

    assert outcome == TransientFailure(cause="store unavailable")


def test_fetch_exception_never_propagates(caplog: pytest.LogCaptureFixture) -> None:
    poller = GameStatePoller(_StubFetcher(ConnectionError("connection reset")))

    with caplog.at_level(py_logging.WARNING, logger="turnwatch.checker.poller"):
        outcome = poller.poll("g1", user_id="u2")

    assert isinstance(outcome, TransientFailure)
    assert outcome.cause == "ConnectionError: connection reset"
    assert "Game fetch raised" in caplog.text


def test_mismatched_game_id_is_a_transient_failure() -> None:
    poller = GameStatePoller(_StubFetcher(GameState(game_id="g9", current_player_id="u2")))

    outcome = poller.poll("g1", user_id="u2")

    assert isinstance(outcome, TransientFailure)
    assert "g9" in outcome.cause


def test_unexpected_payload_is_a_transient_failure() -> None:
    poller = GameStatePoller(_StubFetcher({"currentPlayer": "u2"}))

    outcome = poller.poll("g1", user_id="u2")

    assert isinstance(outcome, TransientFailure)
    assert "dict" in outcome.cause


def test_poller_fetches_once_per_poll() -> None:
    fetcher = _StubFetcher(FetchError("timeout"))
    poller = GameStatePoller(fetcher)

    poller.poll("g1", user_id="u2")

    assert fetcher.calls == ["g1"]
