"""ScanOrchestrator — drives one user-facing scan lifecycle.

Owns the :class:`~depscanner.models.WorkflowState` and runs the three
remote flows against a :class:`~depscanner.backend.ScannerBackend`:

1. URL validation (plus best-effort repository metadata lookup).
2. Repository scan.
3. Statistics, pushed in by a :class:`~depscanner.statistics.StatisticsFeed`.

Every remote failure is caught here and turned into state or a
notification; the orchestrator always ends up in a state from which the
user can retry.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog

from depscanner import views
from depscanner.backend import ScannerBackend
from depscanner.exceptions import error_message
from depscanner.export import (
    DirectoryExportSink,
    ExportSink,
    build_export_document,
    export_filename,
    render_export,
)
from depscanner.models import (
    BannerSeverity,
    Finding,
    NotificationSeverity,
    Phase,
    ScanResult,
    Tab,
    UrlValidation,
    WorkflowState,
)
from depscanner.notifications import LogNotifier, Notifier
from depscanner.statistics import StatisticsFeed

log = structlog.get_logger("depscanner.orchestrator")

MSG_VALID = "Valid GitHub repository URL"
MSG_INVALID = "Invalid GitHub repository URL format"


class ScanOrchestrator:
    """State holder plus async command handlers for the scanner workflow."""

    def __init__(
        self,
        backend: ScannerBackend,
        notifier: Notifier | None = None,
        *,
        statistics_feed: StatisticsFeed | None = None,
        export_sink: ExportSink | None = None,
    ) -> None:
        self._backend = backend
        self._notifier = notifier or LogNotifier()
        self._feed = statistics_feed
        self._export_sink = export_sink or DirectoryExportSink(Path.cwd())
        self._unsubscribe_stats: Callable[[], None] | None = None
        # Tickets: a completion whose ticket is no longer current is discarded.
        self._validation_ticket = 0
        self._scan_epoch = 0
        self.state = WorkflowState()

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Subscribe to statistics and start the feed."""
        if self._feed is None or self._unsubscribe_stats is not None:
            return
        self._unsubscribe_stats = self._feed.subscribe(self._on_statistics)
        await self._feed.start()

    async def close(self) -> None:
        if self._unsubscribe_stats is not None:
            self._unsubscribe_stats()
            self._unsubscribe_stats = None
        if self._feed is not None:
            await self._feed.stop()

    async def __aenter__(self) -> ScanOrchestrator:
        await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── derived state ──────────────────────────────────────────────────────

    @property
    def can_scan(self) -> bool:
        return views.can_scan(self.state)

    @property
    def banner_severity(self) -> BannerSeverity:
        return views.banner_severity(self.state)

    # ── validation ─────────────────────────────────────────────────────────

    async def change_url(self, value: str) -> UrlValidation:
        """Store the raw URL field and validate it.

        The field is locked while a scan is in flight: the edit is ignored
        and the current validation is returned unchanged.
        """
        if self.state.is_scanning:
            log.info("validation.rejected_while_scanning", repository_url=value)
            return self.state.url_validation
        self.state.repository_url = value
        return await self.validate_url()

    async def validate_url(self) -> UrlValidation:
        """Validate the current URL against the backend.

        Only the most recently issued validation may write state; an
        older call that completes later is dropped, and so is any call
        still in flight when a scan starts. Not allowed during a scan.
        """
        if self.state.is_scanning:
            log.info("validation.rejected_while_scanning")
            return self.state.url_validation

        self._validation_ticket += 1
        ticket = self._validation_ticket
        url = self.state.repository_url.strip()

        if not url:
            self.state.url_validation = UrlValidation()
            self.state.validated_url = None
            self._settle_phase()
            return self.state.url_validation

        self.state.phase = Phase.VALIDATING

        try:
            is_valid = await self._backend.validate_url(url)
        except Exception as exc:
            if ticket != self._validation_ticket:
                return self._discard_validation(url)
            log.warning("validation.failed", repository_url=url, error=str(exc))
            self._finish_validation(
                UrlValidation(False, "Error validating URL: " + error_message(exc)), None
            )
            return self.state.url_validation

        if ticket != self._validation_ticket:
            return self._discard_validation(url)

        if not is_valid:
            log.info("validation.invalid", repository_url=url)
            self._finish_validation(UrlValidation(False, MSG_INVALID), None)
            return self.state.url_validation

        # Optimistic: valid now, enriched below if metadata resolves.
        self.state.url_validation = UrlValidation(True, MSG_VALID)
        self.state.validated_url = url

        try:
            info = await self._backend.get_repository_info(url)
        except Exception as exc:
            log.warning("validation.repo_info_failed", repository_url=url, error=str(exc))
            info = None

        if ticket != self._validation_ticket:
            return self._discard_validation(url)

        if info is not None and info.full_name:
            self.state.url_validation = UrlValidation(True, f"Repository: {info.full_name}")
        self._finish_validation(self.state.url_validation, url)
        log.info("validation.valid", repository_url=url, message=self.state.url_validation.message)
        return self.state.url_validation

    def _finish_validation(self, validation: UrlValidation, validated_url: str | None) -> None:
        self.state.url_validation = validation
        self.state.validated_url = validated_url
        self._settle_phase()

    def _discard_validation(self, url: str) -> UrlValidation:
        log.debug("validation.stale_discarded", repository_url=url)
        return self.state.url_validation

    def _settle_phase(self) -> None:
        self.state.phase = Phase.COMPLETED if self.state.has_results else Phase.IDLE

    # ── scan ───────────────────────────────────────────────────────────────

    async def scan(self) -> bool:
        """Run a scan of the validated URL.

        Returns True when a result was applied. Does nothing (returns False)
        when the scan guard fails.
        """
        if not self.can_scan:
            log.debug("scan.rejected", repository_url=self.state.repository_url)
            return False

        url = self.state.repository_url.strip()
        epoch = self._scan_epoch
        # The scan owns the validated URL; a revalidation still in flight is void.
        self._validation_ticket += 1

        self.state.phase = Phase.SCANNING
        self.state.is_scanning = True
        self.state.has_results = False
        self.state.scan_result = None
        self.state.findings = []
        self.state.scan_summary = ""
        self.state.show_details = False
        self.state.selected_finding = None

        try:
            self._notify("Info", "Starting repository scan...", NotificationSeverity.INFO)
            log.info("scan.started", repository_url=url)

            try:
                result = await self._backend.scan_repository(url)
            except Exception as exc:
                if epoch != self._scan_epoch:
                    log.info("scan.stale_discarded", repository_url=url, error=str(exc))
                    return False
                log.error("scan.failed", repository_url=url, error=str(exc))
                self.state.phase = Phase.IDLE
                self._notify(
                    "Error",
                    "Failed to scan repository: " + error_message(exc),
                    NotificationSeverity.ERROR,
                )
                return False

            if epoch != self._scan_epoch:
                log.info("scan.stale_discarded", repository_url=url)
                return False

            self._apply_result(result)
            return True
        finally:
            self.state.is_scanning = False

    def _apply_result(self, result: ScanResult) -> None:
        self.state.scan_result = result
        self.state.findings = list(result.findings or ())
        self.state.scan_summary = result.summary or ""
        self.state.has_results = True
        self.state.active_tab = Tab.RESULTS
        self.state.phase = Phase.COMPLETED

        count = views.findings_count(self.state)
        log.info(
            "scan.completed",
            repository=result.repository_name,
            status=result.status,
            findings=count,
            banner=views.banner_severity(self.state).value,
        )

        if result.succeeded:
            if count > 0:
                self._notify(
                    "Scan Complete",
                    f"Found {count} deprecated component(s)",
                    NotificationSeverity.WARNING,
                )
            else:
                self._notify(
                    "Scan Complete", "No deprecated components found!", NotificationSeverity.SUCCESS
                )
        else:
            errors = "; ".join(result.errors or ())
            self._notify(
                "Scan Completed with Errors",
                errors or "Unknown error occurred",
                NotificationSeverity.ERROR,
            )

    # ── navigation ─────────────────────────────────────────────────────────

    def select_tab(self, tab: Tab | str) -> None:
        tab = Tab(tab)
        if tab is Tab.RESULTS and not self.state.has_results:
            raise ValueError("results tab is disabled until a scan completes")
        self.state.active_tab = tab

    def select_finding(self, index: int) -> Finding:
        """Open the detail view for the finding at *index* in the current findings."""
        if index < 0:
            raise IndexError(f"finding index out of range: {index}")
        finding = self.state.findings[index]
        self.state.selected_finding = finding
        self.state.show_details = True
        return finding

    def close_details(self) -> None:
        self.state.show_details = False
        self.state.selected_finding = None

    def new_scan(self) -> None:
        """Return to the initial Idle state. Statistics are kept."""
        # Any validation or scan still in flight no longer applies.
        self._validation_ticket += 1
        self._scan_epoch += 1

        self.state.repository_url = ""
        self.state.has_results = False
        self.state.scan_result = None
        self.state.findings = []
        self.state.scan_summary = ""
        self.state.show_details = False
        self.state.selected_finding = None
        self.state.active_tab = Tab.SCAN
        self.state.url_validation = UrlValidation()
        self.state.validated_url = None
        self.state.phase = Phase.IDLE
        log.debug("workflow.reset")

    # ── export ─────────────────────────────────────────────────────────────

    def export_results(self) -> str | None:
        """Export the current result as JSON through the export sink.

        Returns the sink location, or None when there is nothing to export
        or the export failed (reported as a notification).
        """
        result = self.state.scan_result
        if result is None:
            return None

        filename = export_filename(result.repository_name)
        try:
            document = build_export_document(result, self.state.findings, self.state.scan_summary)
            location = self._export_sink.save(filename, render_export(document))
        except Exception as exc:
            log.error("export.failed", filename=filename, error=str(exc))
            self._notify(
                "Error",
                "Failed to export results: " + error_message(exc),
                NotificationSeverity.ERROR,
            )
            return None

        log.info("export.saved", location=location, findings=len(self.state.findings))
        self._notify("Success", "Results exported successfully", NotificationSeverity.SUCCESS)
        return location

    # ── internal ───────────────────────────────────────────────────────────

    def _on_statistics(self, snapshot: dict[str, Any]) -> None:
        self.state.statistics = dict(snapshot)

    def _notify(self, title: str, message: str, severity: NotificationSeverity) -> None:
        self._notifier.emit(title, message, severity)
