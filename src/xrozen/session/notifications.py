"""Transient user-facing notifications ("toasts").

Hides how a surface shows success and failure messages: the session
manager only calls ``Notifier.notify``; the CLI prints, the TUI raises a
Textual toast, tests collect.
"""

from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel, ConfigDict

Severity = Literal["information", "warning", "error"]


class Notification(BaseModel):
    """A short message for the user."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    severity: Severity = "information"


class Notifier(ABC):
    """Sink for notifications."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Show a notification."""

    def success(self, description: str) -> None:
        self.notify(Notification(title="Success", description=description))

    def error(self, description: str) -> None:
        self.notify(Notification(title="Error", description=description, severity="error"))


class CollectingNotifier(Notifier):
    """Keeps every notification in memory, newest last."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def errors(self) -> list[Notification]:
        return [n for n in self.notifications if n.severity == "error"]


class NullNotifier(Notifier):
    """Discards notifications."""

    def notify(self, notification: Notification) -> None:
        pass
