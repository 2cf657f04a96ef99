"""Bridges from the session layer into the TUI.

Hides the details of how the TUI receives updates:
- Notifications become Textual toasts
- ``logging`` records from the ``xrozen`` logger go to the log panel

Uses thread-safe calls so records emitted off the UI thread still land.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any

from ..session.notifications import Notification, Notifier
from .config import NOTIFY_ERROR_TIMEOUT, NOTIFY_TIMEOUT

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import DebugPanel


def _call_thread_safe(app: "App", func: Any, *args: Any, **kwargs: Any) -> None:
    """Call a function in a thread-safe manner for UI updates."""
    if app._thread_id != threading.get_ident():
        app.call_from_thread(func, *args, **kwargs)
    else:
        func(*args, **kwargs)


class TextualNotifier(Notifier):
    """Shows notifications as Textual toasts."""

    def __init__(self, app: "App") -> None:
        self.app = app

    def notify(self, notification: Notification) -> None:
        timeout = NOTIFY_ERROR_TIMEOUT if notification.severity == "error" else NOTIFY_TIMEOUT
        _call_thread_safe(
            self.app,
            self.app.notify,
            notification.description,
            title=notification.title,
            severity=notification.severity,
            timeout=timeout,
        )


class PanelLogHandler(logging.Handler):
    """Logging handler that writes records to the TUI log panel."""

    def __init__(self, app: "App", panel: "DebugPanel", level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.app = app
        self.panel = panel

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
            if record.exc_info:
                message = f"{message} ({record.exc_info[1]!r})"
            component = record.name.rsplit(".", 1)[-1]
            _call_thread_safe(self.app, self.panel.write_log, component, message, record.levelno)
        except Exception:
            self.handleError(record)
