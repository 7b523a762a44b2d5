"""CLI entry point: depscanner.

Subcommands:
    depscanner scan https://github.com/org/repo     # Validate, scan, print, export
    depscanner stats                                # Print one statistics snapshot
    depscanner stats --watch                        # Keep printing refreshed snapshots
"""

from __future__ import annotations

import asyncio
import json
import sys

import click

from depscanner import views
from depscanner.backend.http import HttpScannerBackend
from depscanner.core.config import load_settings
from depscanner.core.logging import setup_logging
from depscanner.exceptions import error_message
from depscanner.export import DirectoryExportSink
from depscanner.models import NotificationSeverity, WorkflowState
from depscanner.notifications import CallbackNotifier, Notification
from depscanner.orchestrator import ScanOrchestrator
from depscanner.statistics import StatisticsFeed

_COLORS = {
    NotificationSeverity.INFO: "cyan",
    NotificationSeverity.SUCCESS: "green",
    NotificationSeverity.WARNING: "yellow",
    NotificationSeverity.ERROR: "red",
}


def _echo_notification(notification: Notification) -> None:
    click.secho(
        f"[{notification.title}] {notification.message}",
        fg=_COLORS.get(notification.severity),
        err=True,
    )


def _print_results(state: WorkflowState) -> None:
    result = state.scan_result
    if result is None:
        return
    click.echo(f"Repository: {result.repository_name or '-'}")
    click.echo(f"Scanned:    {views.format_timestamp(result.scan_timestamp) or '-'}")
    click.echo(f"Status:     {result.status or '-'}")
    click.echo(f"Severity:   {views.banner_severity(state).value}")
    if state.scan_summary:
        click.echo(f"Summary:    {state.scan_summary}")
    click.echo(f"Findings:   {views.findings_count(state)}")
    for finding in state.findings:
        location = finding.file_path
        if finding.line_number is not None:
            location += f":{finding.line_number}"
        click.echo(
            f"  [{finding.severity:<6}] {location}  "
            f"{finding.deprecated_component} -> {finding.recommended_replacement}"
        )


async def _run_scan(url: str, export: bool, export_dir: str) -> int:
    settings = load_settings()
    notifier = CallbackNotifier([_echo_notification])
    async with HttpScannerBackend.from_settings(settings) as backend:
        orchestrator = ScanOrchestrator(
            backend,
            notifier,
            export_sink=DirectoryExportSink(export_dir or settings.export_dir),
        )
        validation = await orchestrator.change_url(url)
        if validation.message:
            click.echo(validation.message, err=True)
        if not orchestrator.can_scan:
            return 1

        if not await orchestrator.scan():
            return 1
        _print_results(orchestrator.state)

        if export:
            location = orchestrator.export_results()
            if location is None:
                return 1
            click.echo(f"Exported to {location}")
    return 0


async def _fetch_stats() -> dict:
    settings = load_settings()
    async with HttpScannerBackend.from_settings(settings) as backend:
        return await backend.get_statistics()


async def _watch_stats(interval: float | None, count: int | None) -> None:
    """Print every pushed snapshot until interrupted or *count* snapshots were shown."""
    settings = load_settings()
    done = asyncio.Event()
    shown = 0

    def _print(snapshot: dict) -> None:
        nonlocal shown
        click.echo(json.dumps(snapshot, indent=2))
        shown += 1
        if count is not None and shown >= count:
            done.set()

    async with HttpScannerBackend.from_settings(settings) as backend:
        feed = StatisticsFeed(backend.get_statistics, interval or settings.stats_interval)
        feed.subscribe(_print)
        await feed.start()
        try:
            await done.wait()
        finally:
            await feed.stop()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """Deprecation Scanner: scan GitHub repositories for deprecated components."""
    setup_logging("DEBUG" if verbose else None)


@main.command("scan")
@click.argument("repository_url")
@click.option("--export/--no-export", default=False, help="Write results as JSON")
@click.option("--export-dir", default=None, help="Directory for the exported JSON file")
def scan(repository_url: str, export: bool, export_dir: str | None) -> None:
    """Validate REPOSITORY_URL, scan it and print the findings."""
    sys.exit(asyncio.run(_run_scan(repository_url, export, export_dir or "")))


@main.command("stats")
@click.option("--watch", is_flag=True, help="Keep printing snapshots as they refresh")
@click.option("--interval", type=float, default=None, help="Refresh seconds (watch mode)")
@click.option("--count", type=int, default=None, help="Stop after N snapshots (watch mode)")
def stats(watch: bool, interval: float | None, count: int | None) -> None:
    """Print the current scan statistics snapshot."""
    if watch:
        try:
            asyncio.run(_watch_stats(interval, count))
        except KeyboardInterrupt:
            pass
        return
    try:
        snapshot = asyncio.run(_fetch_stats())
    except Exception as exc:
        click.echo(f"Error loading statistics: {error_message(exc)}", err=True)
        sys.exit(1)
    click.echo(json.dumps(snapshot, indent=2))


if __name__ == "__main__":
    main()
