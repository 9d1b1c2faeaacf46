"""Turn checker domain package."""

from .activation import ActivationScheduler, TimerActivationScheduler
from .notifications import (
    ChannelRegistry,
    LoggingNotificationSink,
    NotificationChannel,
    NotificationContent,
    NotificationSink,
    ensure_channels,
)
from .poller import GameFetcher, GameStatePoller
from .service import FIRST_CHECK_MINUTES, TurnCheckScheduler

__all__ = [
    "ActivationScheduler",
    "ChannelRegistry",
    "ensure_channels",
    "FIRST_CHECK_MINUTES",
    "GameFetcher",
    "GameStatePoller",
    "LoggingNotificationSink",
    "NotificationChannel",
    "NotificationContent",
    "NotificationSink",
    "TimerActivationScheduler",
    "TurnCheckScheduler",
]
