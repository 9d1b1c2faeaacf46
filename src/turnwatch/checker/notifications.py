"""Notification content, channel provisioning and the sink contract."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from turnwatch.errors import user_facing_error

logger = py_logging.getLogger(__name__)

NOTIFICATION_ID_STATUS = 1
NOTIFICATION_ID_INFO = 2

CHANNEL_ID_INFO = "TURNWATCH_CHANNEL_INFO"
CHANNEL_ID_SERVICE = "TURNWATCH_CHANNEL_SERVICE_02"

# Channels cannot be modified once created; retired ids go here.
HISTORIC_CHANNEL_IDS: tuple[str, ...] = ("TURNWATCH_CHANNEL_SERVICE",)

NOT_CHECKED_YET = "-"


class NotificationImportance(str, Enum):
    HIGH = "high"
    DEFAULT = "default"
    MIN = "min"


class NotificationCategory(str, Enum):
    SOCIAL = "social"
    SERVICE = "service"
    ERROR = "error"


@dataclass(frozen=True)
class NotificationChannel:
    channel_id: str
    name: str
    description: str
    importance: NotificationImportance
    show_badge: bool = True


INFO_CHANNEL = NotificationChannel(
    channel_id=CHANNEL_ID_INFO,
    name="Multiplayer Turn Checker Alert",
    description="Informs you when it's your turn in multiplayer.",
    importance=NotificationImportance.HIGH,
)
SERVICE_CHANNEL = NotificationChannel(
    channel_id=CHANNEL_ID_SERVICE,
    name="Multiplayer Turn Checker Persistent Status",
    description="Shown constantly to inform you about background checking.",
    importance=NotificationImportance.MIN,
    show_badge=False,
)
CURRENT_CHANNELS: tuple[NotificationChannel, ...] = (INFO_CHANNEL, SERVICE_CHANNEL)


@dataclass(frozen=True)
class NotificationContent:
    notification_id: int
    channel_id: str
    title: str
    text: str
    importance: NotificationImportance
    category: NotificationCategory
    ongoing: bool = False
    alert_once: bool = False


class NotificationSink(Protocol):
    def show_turn_ready(self) -> None: ...

    def show_persistent_status(self, last_checked_at: datetime | None, interval_minutes: int) -> None: ...

    def show_error(self) -> None: ...

    def clear_persistent_status(self) -> None: ...


class ChannelRegistry(Protocol):
    def get_channel(self, channel_id: str) -> NotificationChannel | None: ...

    def create_channel(self, channel: NotificationChannel) -> None: ...

    def delete_channel(self, channel_id: str) -> None: ...


def ensure_channels(
    registry: ChannelRegistry,
    current: Iterable[NotificationChannel] = CURRENT_CHANNELS,
    historic: Iterable[str] = HISTORIC_CHANNEL_IDS,
) -> list[str]:
    """Create every current channel and delete retired ones that still exist.

    Safe to call on every start. Returns the ids of the deleted channels.
    """
    current_ids: set[str] = set()
    for channel in current:
        registry.create_channel(channel)
        current_ids.add(channel.channel_id)

    deleted: list[str] = []
    for channel_id in historic:
        if channel_id in current_ids:
            continue
        if registry.get_channel(channel_id) is not None:
            registry.delete_channel(channel_id)
            deleted.append(channel_id)
    logger.debug("Notification channels ensured current=%s deleted=%s", sorted(current_ids), deleted)
    return deleted


def format_check_time(moment: datetime | None) -> str:
    if moment is None:
        return NOT_CHECKED_YET
    return f"{moment.hour}:{moment.minute:02d}"


def turn_ready_content() -> NotificationContent:
    return NotificationContent(
        notification_id=NOTIFICATION_ID_INFO,
        channel_id=CHANNEL_ID_INFO,
        title="It's your turn!",
        text="Your friends are waiting on your turn.",
        importance=NotificationImportance.HIGH,
        category=NotificationCategory.SOCIAL,
    )


def status_content(last_checked_at: datetime | None, interval_minutes: int) -> NotificationContent:
    return NotificationContent(
        notification_id=NOTIFICATION_ID_STATUS,
        channel_id=CHANNEL_ID_SERVICE,
        title=f"Last online turn check: [{format_check_time(last_checked_at)}]",
        text=(
            "You will be informed when it's your turn in multiplayer. "
            f"Checks ca. every [{interval_minutes}] minute(s) when Internet available."
        ),
        importance=NotificationImportance.MIN,
        category=NotificationCategory.SERVICE,
        ongoing=True,
        alert_once=True,
    )


def error_content() -> NotificationContent:
    return NotificationContent(
        notification_id=NOTIFICATION_ID_INFO,
        channel_id=CHANNEL_ID_INFO,
        title="An error has occurred",
        text=user_facing_error(
            "Multiplayer turn notifier service terminated",
            hint="open the game to restart turn checks",
        ),
        importance=NotificationImportance.DEFAULT,
        category=NotificationCategory.ERROR,
    )


Publisher = Callable[[NotificationContent], None]


class LoggingNotificationSink:
    """Sink that hands rendered content to a publisher and tracks what is shown.

    Without a publisher the content is written to the module logger, which is
    enough for headless hosts and for tracing a cycle.
    """

    def __init__(self, publisher: Publisher | None = None) -> None:
        self._publisher = publisher
        self._active: dict[int, NotificationContent] = {}

    @property
    def active(self) -> dict[int, NotificationContent]:
        return dict(self._active)

    def _publish(self, content: NotificationContent) -> None:
        self._active[content.notification_id] = content
        if self._publisher is not None:
            self._publisher(content)
            return
        logger.info(
            "notification id=%s channel=%s title=%s text=%s",
            content.notification_id,
            content.channel_id,
            content.title,
            content.text,
        )

    def show_turn_ready(self) -> None:
        self._publish(turn_ready_content())

    def show_persistent_status(self, last_checked_at: datetime | None, interval_minutes: int) -> None:
        self._publish(status_content(last_checked_at, interval_minutes))

    def show_error(self) -> None:
        self._publish(error_content())

    def clear_persistent_status(self) -> None:
        if self._active.pop(NOTIFICATION_ID_STATUS, None) is not None:
            logger.info("notification id=%s cleared", NOTIFICATION_ID_STATUS)
