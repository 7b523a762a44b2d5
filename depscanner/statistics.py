"""StatisticsFeed — push-based channel of scan statistics snapshots."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

log = structlog.get_logger("depscanner.statistics")

Snapshot = dict[str, Any]


class StatisticsFeed:
    """Poll the statistics provider on its own cadence and push snapshots.

    The loop fetches once on start, then again every *interval* seconds or
    as soon as :meth:`refresh` is called. Each snapshot replaces the
    previous one whole. A failed fetch is logged and the last good snapshot
    is kept; it never stops the loop.
    """

    def __init__(self, fetch: Callable[[], Awaitable[Snapshot]], interval: float) -> None:
        self._fetch = fetch
        self.interval = interval
        self.trigger = asyncio.Event()
        self.latest: Snapshot | None = None
        self._subscribers: list[Callable[[Snapshot], None]] = []
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, callback: Callable[[Snapshot], None]) -> Callable[[], None]:
        """Register *callback*; it receives the latest snapshot right away if one exists.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)
        if self.latest is not None:
            callback(self.latest)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def refresh(self) -> None:
        self.trigger.set()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="statistics-feed")
        log.debug("statistics.started", interval=self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        log.debug("statistics.stopped")

    async def poll_once(self) -> Snapshot | None:
        """Fetch one snapshot and publish it. Returns ``None`` on failure."""
        try:
            snapshot = await self._fetch()
        except Exception as exc:
            log.error("statistics.fetch_failed", error=str(exc))
            return None
        self._publish(snapshot)
        return snapshot

    async def _loop(self) -> None:
        while True:
            await self.poll_once()
            try:
                await asyncio.wait_for(self.trigger.wait(), timeout=self.interval)
                self.trigger.clear()
            except asyncio.TimeoutError:
                pass

    def _publish(self, snapshot: Snapshot) -> None:
        self.latest = snapshot
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                log.exception("statistics.subscriber_failed")
