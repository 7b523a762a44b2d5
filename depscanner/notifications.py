"""User-facing notifications emitted by the orchestrator."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

import structlog

from depscanner.models import NotificationSeverity

log = structlog.get_logger("depscanner.notifications")


@dataclass(frozen=True)
class Notification:
    title: str
    message: str
    severity: NotificationSeverity


class Notifier(Protocol):
    def emit(self, title: str, message: str, severity: NotificationSeverity) -> None: ...


class LogNotifier:
    """Write notifications to the structured log, mapping severity to log level."""

    _LEVELS = {
        NotificationSeverity.INFO: "info",
        NotificationSeverity.SUCCESS: "info",
        NotificationSeverity.WARNING: "warning",
        NotificationSeverity.ERROR: "error",
    }

    def emit(self, title: str, message: str, severity: NotificationSeverity) -> None:
        level = self._LEVELS.get(severity, "info")
        getattr(log, level)("notification", title=title, message=message, severity=severity.value)


class CallbackNotifier:
    """Fan a notification out to every registered callback.

    A failing callback is logged and skipped; it never reaches the emitter.
    """

    def __init__(self, callbacks: Iterable[Callable[[Notification], None]] = ()) -> None:
        self.callbacks: list[Callable[[Notification], None]] = list(callbacks)

    def subscribe(self, callback: Callable[[Notification], None]) -> None:
        self.callbacks.append(callback)

    def emit(self, title: str, message: str, severity: NotificationSeverity) -> None:
        notification = Notification(title=title, message=message, severity=severity)
        for callback in self.callbacks:
            try:
                callback(notification)
            except Exception:
                log.exception("notification.callback_failed", title=title)
