"""Tests for notifiers."""

from __future__ import annotations

from unittest.mock import MagicMock

from depscanner.models import NotificationSeverity
from depscanner.notifications import CallbackNotifier, LogNotifier, Notification


class TestCallbackNotifier:
    def test_fans_out(self):
        first, second = MagicMock(), MagicMock()
        notifier = CallbackNotifier([first])
        notifier.subscribe(second)

        notifier.emit(
            "Scan Complete", "Found 2 deprecated component(s)", NotificationSeverity.WARNING
        )

        expected = Notification(
            "Scan Complete", "Found 2 deprecated component(s)", NotificationSeverity.WARNING
        )
        first.assert_called_once_with(expected)
        second.assert_called_once_with(expected)

    def test_failing_callback_does_not_stop_others(self):
        broken = MagicMock(side_effect=RuntimeError("renderer gone"))
        healthy = MagicMock()
        notifier = CallbackNotifier([broken, healthy])

        notifier.emit("Info", "Starting repository scan...", NotificationSeverity.INFO)

        healthy.assert_called_once()


class TestLogNotifier:
    def test_emit_does_not_raise(self):
        notifier = LogNotifier()
        for severity in NotificationSeverity:
            notifier.emit("Title", "message", severity)
