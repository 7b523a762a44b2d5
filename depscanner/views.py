"""Pure derivations over :class:`~depscanner.models.WorkflowState`.

Nothing here is cached or stored: every value is recomputed from the
state on each read, so a renderer always sees values consistent with the
current findings set.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from depscanner.models import BannerSeverity, Finding, Severity, Tab, WorkflowState


@dataclass(frozen=True)
class TabOption:
    label: str
    value: Tab
    disabled: bool = False


def is_url_valid(state: WorkflowState) -> bool:
    return state.url_validation.is_valid and len(state.repository_url.strip()) > 0


def can_scan(state: WorkflowState) -> bool:
    """Valid non-empty URL, no scan in flight, and the URL is the one that was validated."""
    return (
        is_url_valid(state)
        and not state.is_scanning
        and state.validated_url == state.repository_url.strip()
    )


def scan_button_label(state: WorkflowState) -> str:
    return "Scanning..." if state.is_scanning else "Scan Repository"


def findings_count(state: WorkflowState) -> int:
    return len(state.findings) if state.findings else 0


def has_findings(state: WorkflowState) -> bool:
    return findings_count(state) > 0


def classify_findings(findings: list[Finding] | tuple[Finding, ...]) -> BannerSeverity:
    """Reduce a findings set to its worst severity.

    HIGH beats MEDIUM beats everything else; a set without either is
    SUCCESS. Ordering and LOW counts never matter.
    """
    severities = {f.severity for f in findings}
    if Severity.HIGH.value in severities:
        return BannerSeverity.HIGH
    if Severity.MEDIUM.value in severities:
        return BannerSeverity.MEDIUM
    return BannerSeverity.SUCCESS


def banner_severity(state: WorkflowState) -> BannerSeverity:
    if state.scan_result is None:
        return BannerSeverity.BASE
    return classify_findings(state.findings)


_BANNER_VARIANTS = {
    BannerSeverity.HIGH: "error",
    BannerSeverity.MEDIUM: "warning",
    BannerSeverity.SUCCESS: "success",
    BannerSeverity.BASE: "base",
}


def banner_variant(state: WorkflowState) -> str:
    return _BANNER_VARIANTS[banner_severity(state)]


def alert_class(state: WorkflowState) -> str:
    return (
        "slds-notify slds-notify_alert "
        f"slds-theme_{banner_variant(state)} slds-m-bottom_medium"
    )


def tab_options(state: WorkflowState) -> list[TabOption]:
    return [
        TabOption("Scan Repository", Tab.SCAN),
        TabOption("Results", Tab.RESULTS, disabled=not state.has_results),
        TabOption("Statistics", Tab.STATISTICS),
    ]


def is_results_disabled(state: WorkflowState) -> bool:
    return not state.has_results


def is_scan_disabled(state: WorkflowState) -> bool:
    return not can_scan(state)


# ── validation display ───────────────────────────────────────────────────


def validation_class(state: WorkflowState) -> str:
    if state.url_validation.is_valid:
        return "slds-text-color_success"
    return "slds-text-color_error"


def validation_icon(state: WorkflowState) -> str:
    return "utility:success" if state.url_validation.is_valid else "utility:error"


# ── per-finding display ──────────────────────────────────────────────────

_SEVERITY_CLASSES = {
    Severity.HIGH.value: "slds-text-color_error",
    Severity.MEDIUM.value: "slds-text-color_warning",
    Severity.LOW.value: "slds-text-color_success",
}

_SEVERITY_ICONS = {
    Severity.HIGH.value: "utility:error",
    Severity.MEDIUM.value: "utility:warning",
    Severity.LOW.value: "utility:info",
}


def severity_class(severity: str | None) -> str:
    return _SEVERITY_CLASSES.get(severity or "", "")


def severity_icon(severity: str | None) -> str:
    return _SEVERITY_ICONS.get(severity or "", "utility:info")


def format_timestamp(value: str | None) -> str:
    """Render an ISO-8601 timestamp in local time; unparseable input is returned as-is."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%Y-%m-%d %H:%M:%S")
