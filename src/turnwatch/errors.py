"""Deterministic error model for the turn checker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCode(IntEnum):
    SUCCESS = 0
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    STATE_ERROR = 5
    VALIDATION_ERROR = 7


@dataclass
class TurnWatchError(Exception):
    message: str
    code: ErrorCode = ErrorCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
