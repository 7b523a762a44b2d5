"""Async HTTP implementation of the scanner backend with retries."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pydantic
import structlog

from depscanner.backend.schemas import (
    ErrorResponse,
    RepositoryInfoResponse,
    ScanResultResponse,
    ValidateUrlResponse,
)
from depscanner.core.config import Settings
from depscanner.exceptions import BackendError
from depscanner.models import RepositoryInfo, ScanResult

log = structlog.get_logger("depscanner.backend")

_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 1.0  # seconds


class HttpScannerBackend:
    """Thin async wrapper around the scanner REST API.

    Endpoints (relative to ``base_url``):

    ==========================  ======  ================================
    ``/validate``               POST    ``{"isValid": bool}`` or bare bool
    ``/repository-info``        POST    repository metadata or ``null``
    ``/scan``                   POST    scan result
    ``/statistics``             GET     statistics snapshot
    ==========================  ======  ================================

    Short calls retry with exponential backoff on 5xx and timeouts. The scan
    call is sent once and has no read timeout: scans can run arbitrarily
    long and bounding them is the backend's job.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers: dict[str, str] = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> HttpScannerBackend:
        return cls(settings.backend_url, token=settings.api_token, timeout=settings.request_timeout)

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpScannerBackend:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def validate_url(self, repository_url: str) -> bool:
        data = await self._call("POST", "/validate", {"repositoryUrl": repository_url})
        if isinstance(data, bool):
            return data
        return self._parse(ValidateUrlResponse, data).is_valid

    async def get_repository_info(self, repository_url: str) -> RepositoryInfo | None:
        data = await self._call("POST", "/repository-info", {"repositoryUrl": repository_url})
        if data is None:
            return None
        return self._parse(RepositoryInfoResponse, data).to_model()

    async def scan_repository(self, repository_url: str) -> ScanResult:
        log.info("backend.scan_request", repository_url=repository_url)
        data = await self._call(
            "POST",
            "/scan",
            {"repositoryUrl": repository_url},
            retry=False,
            timeout=httpx.Timeout(self._timeout, read=None),
        )
        return self._parse(ScanResultResponse, data or {}).to_model()

    async def get_statistics(self) -> dict[str, Any]:
        data = await self._call("GET", "/statistics")
        if not isinstance(data, dict):
            raise BackendError(f"unexpected statistics payload: {type(data).__name__}")
        return data

    # ── internal ───────────────────────────────────────────────────────────

    async def _call(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        retry: bool = True,
        timeout: httpx.Timeout | None = None,
    ) -> Any:
        """Send a request and return decoded JSON, translating failures to BackendError."""
        attempts = _MAX_RETRIES if retry else 1
        last_exc: BackendError | None = None

        for attempt in range(attempts):
            try:
                kwargs: dict[str, Any] = {"json": body} if body is not None else {}
                if timeout is not None:
                    kwargs["timeout"] = timeout
                resp = await self._client.request(method, path, **kwargs)
            except httpx.TimeoutException as exc:
                log.warning(
                    "backend.timeout",
                    path=path,
                    attempt=attempt + 1,
                    max_retries=attempts,
                )
                last_exc = BackendError(f"request to {path} timed out")
                last_exc.__cause__ = exc
            except httpx.HTTPError as exc:
                raise BackendError(str(exc) or exc.__class__.__name__) from exc
            else:
                if resp.status_code < 500:
                    return self._decode(resp)
                # 5xx: retry
                log.warning(
                    "backend.server_error",
                    path=path,
                    status=resp.status_code,
                    attempt=attempt + 1,
                    max_retries=attempts,
                )
                last_exc = BackendError(self._error_text(resp), status_code=resp.status_code)

            if attempt < attempts - 1:
                await asyncio.sleep(_RETRY_BASE_DELAY * (2**attempt))

        raise last_exc  # type: ignore[misc]

    def _decode(self, resp: httpx.Response) -> Any:
        if resp.status_code >= 400:
            raise BackendError(self._error_text(resp), status_code=resp.status_code)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise BackendError(f"invalid JSON from scanner backend: {exc}") from exc

    @staticmethod
    def _error_text(resp: httpx.Response) -> str:
        """Prefer the backend's ``{"message": ...}`` body over the bare status line."""
        try:
            message = ErrorResponse.model_validate(resp.json()).message
        except (ValueError, pydantic.ValidationError):
            message = None
        return message or f"HTTP {resp.status_code} {resp.reason_phrase}".strip()

    @staticmethod
    def _parse(schema: type[pydantic.BaseModel], data: Any) -> Any:
        try:
            return schema.model_validate(data)
        except pydantic.ValidationError as exc:
            raise BackendError(f"malformed response from scanner backend: {exc}") from exc
