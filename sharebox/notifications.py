"""Notification sink: global error string plus a stream of transient messages."""

from collections import deque
from typing import Callable, Deque, List

from common.logging_config import get_logger
from sharebox.types import Notification

logger = get_logger(__name__)

DESTRUCTIVE = "destructive"


class NotificationSink:
    """
    Collects user-facing outcomes.

    ``error`` is the persistent error banner shown above the collection.
    Notifications are transient: subscribers receive each one as it is
    emitted, and the most recent ones are kept in ``history``.
    """

    def __init__(self, history_size: int = 50):
        self.error = ""
        self.history: Deque[Notification] = deque(maxlen=history_size)
        self._subscribers: List[Callable[[Notification], None]] = []

    def subscribe(self, callback: Callable[[Notification], None]) -> None:
        self._subscribers.append(callback)

    def set_error(self, message: str) -> None:
        self.error = message

    def clear_error(self) -> None:
        self.error = ""

    def notify(self, title: str, description: str, variant: str = "default") -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.history.append(notification)
        log = logger.warning if notification.is_error else logger.info
        log(f"{title}: {description}")
        for callback in list(self._subscribers):
            try:
                callback(notification)
            except Exception as e:
                logger.error(f"Notification subscriber failed: {e}", exc_info=True)
        return notification

    def success(self, description: str, title: str = "Success") -> Notification:
        return self.notify(title, description)

    def failure(self, description: str, title: str = "Error") -> Notification:
        return self.notify(title, description, variant=DESTRUCTIVE)
