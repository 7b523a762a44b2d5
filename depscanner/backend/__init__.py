"""Remote scanner backend: the collaborator that does the actual scanning.

The orchestrator only depends on the :class:`ScannerBackend` protocol;
:class:`~depscanner.backend.http.HttpScannerBackend` is the production
implementation.
"""

from __future__ import annotations

from typing import Any, Protocol

from depscanner.models import RepositoryInfo, ScanResult


class ScannerBackend(Protocol):
    async def validate_url(self, repository_url: str) -> bool: ...

    async def get_repository_info(self, repository_url: str) -> RepositoryInfo | None: ...

    async def scan_repository(self, repository_url: str) -> ScanResult: ...

    async def get_statistics(self) -> dict[str, Any]: ...
