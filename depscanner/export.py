"""Export of scan results as a downloadable JSON document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from depscanner.exceptions import ExportError
from depscanner.models import Finding, ScanResult

FALLBACK_NAME = "results"


class ExportSink(Protocol):
    """Destination for an exported document (the "download")."""

    def save(self, filename: str, content: str) -> str:
        """Persist *content* under *filename* and return where it went."""
        ...


class DirectoryExportSink:
    """Write exports as files inside a directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def save(self, filename: str, content: str) -> str:
        path = self.directory / filename
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ExportError(f"cannot write {path}: {exc.strerror or exc}") from exc
        return str(path)


def export_filename(repository_name: str | None) -> str:
    """``deprecation-scan-<org>-<repo>.json``; every slash becomes a hyphen."""
    stem = repository_name.replace("/", "-") if repository_name else FALLBACK_NAME
    return f"deprecation-scan-{stem}.json"


def _export_finding(finding: Finding) -> dict[str, Any]:
    return {
        "file": finding.file_path,
        "line": finding.line_number,
        "deprecated": finding.deprecated_component,
        "replacement": finding.recommended_replacement,
        "severity": finding.severity,
        "description": finding.description,
    }


def build_export_document(
    result: ScanResult,
    findings: list[Finding] | tuple[Finding, ...],
    summary: str,
) -> dict[str, Any]:
    return {
        "repository": result.repository_name,
        "scanDate": result.scan_timestamp,
        "summary": summary,
        "findings": [_export_finding(f) for f in findings],
    }


def render_export(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2)
