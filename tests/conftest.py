"""Shared fixtures for depscanner tests — no scanner backend needed (mocked)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from depscanner.models import NotificationSeverity, RepositoryInfo, ScanResult
from depscanner.notifications import Notification
from depscanner.orchestrator import ScanOrchestrator


class RecordingNotifier:
    """Collect emitted notifications for assertions."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def emit(self, title: str, message: str, severity: NotificationSeverity) -> None:
        self.sent.append(Notification(title=title, message=message, severity=severity))

    @property
    def severities(self) -> list[NotificationSeverity]:
        return [n.severity for n in self.sent]


class MemoryExportSink:
    def __init__(self) -> None:
        self.saved: dict[str, str] = {}

    def save(self, filename: str, content: str) -> str:
        self.saved[filename] = content
        return f"memory://{filename}"


@pytest.fixture
def backend() -> AsyncMock:
    mock = AsyncMock()
    mock.validate_url = AsyncMock(return_value=True)
    mock.get_repository_info = AsyncMock(return_value=RepositoryInfo(full_name="acme/widgets"))
    mock.scan_repository = AsyncMock(
        return_value=ScanResult(
            status="SUCCESS",
            repository_name="acme/widgets",
            scan_timestamp="2026-01-15T12:00:00Z",
            summary="Scanned 42 files",
            findings=(),
        )
    )
    mock.get_statistics = AsyncMock(return_value={"totalScans": 3})
    return mock


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def export_sink() -> MemoryExportSink:
    return MemoryExportSink()


@pytest.fixture
def orchestrator(backend, notifier, export_sink) -> ScanOrchestrator:
    return ScanOrchestrator(backend, notifier, export_sink=export_sink)


@pytest.fixture
async def validated(orchestrator) -> ScanOrchestrator:
    """Orchestrator whose URL field holds a validated repository URL."""
    await orchestrator.change_url("https://github.com/acme/widgets")
    return orchestrator
