from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from admitdesk.errors import PortalError
from admitdesk.types import NotificationLevel

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Notification:
    level: NotificationLevel
    message: str
    error: PortalError | None = None

    @property
    def ok(self) -> bool:
        return self.level != "error"


Listener = Callable[[Notification], None]


class Notifier:
    """Fan-out for the one-line success/error messages shown after each action."""

    def __init__(self) -> None:
        self.history: list[Notification] = []
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def publish(self, level: NotificationLevel, message: str, error: PortalError | None = None) -> Notification:
        notification = Notification(level=level, message=message, error=error)
        self.history.append(notification)
        if error is not None:
            logger.info("%s: %s (%s)", level, message, error)
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.publish("success", message)

    def error(self, message: str, error: PortalError | None = None) -> Notification:
        return self.publish("error", message, error)

    def info(self, message: str) -> Notification:
        return self.publish("info", message)

    @property
    def last(self) -> Notification | None:
        return self.history[-1] if self.history else None
