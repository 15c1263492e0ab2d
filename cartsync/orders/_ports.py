"""
Ports — the UI collaborators the coordinator talks to.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Protocol


class NotificationKind(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


DEFAULT_DURATION = timedelta(seconds=5)
SUCCESS_DURATION = timedelta(seconds=10)


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    title: str
    message: str
    duration: timedelta = DEFAULT_DURATION


class Notifier(Protocol):
    """Shows a transient notification. Must not raise."""

    def notify(self, notification: Notification) -> None: ...


class Navigator(Protocol):
    def navigate(self, route: str) -> None: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Recording Implementations
# ═══════════════════════════════════════════════════════════════════════════════


class RecordingNotifier:
    """
    Notifier that keeps every notification in order.

    Example:
        notifier = RecordingNotifier()
        ...
        assert notifier.last.kind is NotificationKind.SUCCESS
    """

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None


class RecordingNavigator:
    def __init__(self) -> None:
        self.routes: list[str] = []

    def navigate(self, route: str) -> None:
        self.routes.append(route)


__all__ = (
    "NotificationKind",
    "DEFAULT_DURATION",
    "SUCCESS_DURATION",
    "Notification",
    "Notifier",
    "Navigator",
    "RecordingNotifier",
    "RecordingNavigator",
)
