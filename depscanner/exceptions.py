"""Custom exceptions for the deprecation scanner client."""

from __future__ import annotations


class ScannerClientError(Exception):
    """Base exception for all scanner client errors."""


class BackendError(ScannerClientError):
    """Raised when a remote scanner call fails (transport fault or error response).

    *message* is the human-readable cause surfaced to the user; *status_code*
    is set when the backend answered with an HTTP error.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ExportError(ScannerClientError):
    """Raised when scan results cannot be serialized or saved."""


def error_message(exc: BaseException) -> str:
    """Return the user-facing cause text for *exc*."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__
