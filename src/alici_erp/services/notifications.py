"""
User-facing notifications.

Replaces the browser toast: services emit short success/error messages
here, and whatever front end is attached (a CLI, a test, a GUI) listens.
"""

from dataclasses import dataclass
from typing import Callable, List

SUCCESS = "success"
ERROR = "error"
INFO = "info"


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


Listener = Callable[[Notification], None]


class Notifier:
    """
    Ordered record of notifications, with optional listeners.

    Example:
        >>> notifier = Notifier()
        >>> notifier.success("Venta procesada")
        >>> notifier.messages()
        ['Venta procesada']
    """

    def __init__(self):
        self._history: List[Notification] = []
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def notify(self, level: str, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self._history.append(notification)
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(ERROR, message)

    def info(self, message: str) -> Notification:
        return self.notify(INFO, message)

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    def messages(self, level: str = None) -> List[str]:
        """Messages in emission order, optionally only one level."""
        return [n.message for n in self._history if level is None or n.level == level]

    def clear(self) -> None:
        self._history.clear()
