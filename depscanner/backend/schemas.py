"""Wire schemas for scanner backend payloads.

The backend speaks camelCase JSON. Every field is optional: a payload is
never assumed fully populated, missing values fall back to defaults.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from depscanner.models import Finding, RepositoryInfo, ScanResult


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ValidateUrlResponse(_Payload):
    is_valid: bool = False


class RepositoryInfoResponse(_Payload):
    full_name: str | None = None
    description: str | None = None
    default_branch: str | None = None
    html_url: str | None = None

    def to_model(self) -> RepositoryInfo:
        return RepositoryInfo(
            full_name=self.full_name,
            description=self.description,
            default_branch=self.default_branch,
            html_url=self.html_url,
        )


class FindingPayload(_Payload):
    file_path: str | None = None
    line_number: int | None = None
    deprecated_component: str | None = None
    recommended_replacement: str | None = None
    severity: str = "LOW"
    description: str | None = None

    @field_validator("severity", mode="before")
    @classmethod
    def _upper_severity(cls, value: object) -> object:
        if value is None:
            return "LOW"
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def to_model(self) -> Finding:
        return Finding(
            file_path=self.file_path or "",
            line_number=self.line_number,
            deprecated_component=self.deprecated_component or "",
            recommended_replacement=self.recommended_replacement or "",
            severity=self.severity,
            description=self.description or "",
        )


class ScanResultResponse(_Payload):
    status: str | None = None
    repository_name: str | None = None
    scan_timestamp: str | None = None
    summary: str | None = None
    findings: list[FindingPayload] | None = None
    errors: list[str] | None = None

    def to_model(self) -> ScanResult:
        return ScanResult(
            status=self.status,
            repository_name=self.repository_name,
            scan_timestamp=self.scan_timestamp,
            summary=self.summary,
            findings=(
                tuple(f.to_model() for f in self.findings) if self.findings is not None else None
            ),
            errors=tuple(self.errors) if self.errors is not None else None,
        )


class ErrorResponse(_Payload):
    message: str | None = None
