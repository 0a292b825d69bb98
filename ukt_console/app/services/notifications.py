"""Notification channel used to report operation outcomes to the user."""

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from ukt_console.app.core.time import utc_now

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: str
    message: str
    created_at: object = field(default_factory=utc_now)


class Notifier:
    def __init__(self):
        self.history: List[Notification] = []
        self._listeners: List[Callable[[Notification], None]] = []

    def subscribe(self, listener: Callable[[Notification], None]) -> None:
        self._listeners.append(listener)

    def success(self, message: str) -> Notification:
        logger.info(message)
        return self._publish(Notification(SUCCESS, message))

    def error(self, message: str) -> Notification:
        logger.error(message)
        return self._publish(Notification(ERROR, message))

    @property
    def last(self) -> Notification | None:
        return self.history[-1] if self.history else None

    def _publish(self, notification: Notification) -> Notification:
        self.history.append(notification)
        for listener in self._listeners:
            listener(notification)
        return notification
