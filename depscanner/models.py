"""Data model for the scan workflow.

Pure data structures, no I/O. ``WorkflowState`` is the single mutable
container owned by :class:`~depscanner.orchestrator.ScanOrchestrator`;
everything else is replaced wholesale rather than mutated.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class Phase(str, enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SCANNING = "scanning"
    COMPLETED = "completed"


class Tab(str, enum.Enum):
    SCAN = "scan"
    RESULTS = "results"
    STATISTICS = "statistics"


class Severity(str, enum.Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class BannerSeverity(str, enum.Enum):
    """Worst-case severity over a whole findings set."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    SUCCESS = "SUCCESS"
    BASE = "BASE"


class ScanStatus(str, enum.Enum):
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class NotificationSeverity(str, enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class UrlValidation:
    is_valid: bool = True
    message: str = ""


@dataclass(frozen=True)
class RepositoryInfo:
    full_name: str | None = None
    description: str | None = None
    default_branch: str | None = None
    html_url: str | None = None


@dataclass(frozen=True)
class Finding:
    """One detected usage of a deprecated component."""

    file_path: str = ""
    line_number: int | None = None
    deprecated_component: str = ""
    recommended_replacement: str = ""
    severity: str = Severity.LOW.value  # HIGH | MEDIUM | LOW, kept as sent
    description: str = ""


@dataclass(frozen=True)
class ScanResult:
    status: str | None = None
    repository_name: str | None = None
    scan_timestamp: str | None = None
    summary: str | None = None
    findings: tuple[Finding, ...] | None = None
    errors: tuple[str, ...] | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == ScanStatus.SUCCESS.value


@dataclass
class WorkflowState:
    """All mutable workflow state for one orchestrator instance."""

    repository_url: str = ""
    phase: Phase = Phase.IDLE
    active_tab: Tab = Tab.SCAN

    url_validation: UrlValidation = field(default_factory=UrlValidation)
    validated_url: str | None = None

    is_scanning: bool = False
    has_results: bool = False
    scan_result: ScanResult | None = None
    findings: list[Finding] = field(default_factory=list)
    scan_summary: str = ""

    show_details: bool = False
    selected_finding: Finding | None = None

    statistics: dict[str, Any] = field(default_factory=dict)
