"""Remote reconciliation and its polling schedule.

One cycle follows a strict order:
1) Fetch the raw payload from the remote source
2) Translate each item into a QuoteRecord, skipping malformed items
3) Merge additively into the store, deduplicating on (text, category)
4) Persist and rebuild the category index only if something was added
5) Report the outcome to the caller

The fetch is the only suspension point. Merging happens after it returns and
reads the store as it is at that moment, so quotes added by the user while
the request was pending are taken into account.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from core.context import QuoteContext
from core.errors import DecodeError, TransportError
from core.models import SyncResult, SyncStatus
from core.ports import RemoteSourcePort
from core.serializer import translate_remote_payload

LOGGER = logging.getLogger(__name__)


class Reconciler:
    """Pulls candidate records from a remote source and merges new ones."""

    def __init__(self, context: QuoteContext, source: RemoteSourcePort) -> None:
        self._context = context
        self._source = source
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def run_cycle(self) -> SyncResult:
        """Run one cycle, or skip it if the previous one has not finished."""

        if self._in_flight:
            LOGGER.info("Sync skipped, previous cycle still running")
            return SyncResult(status=SyncStatus.SKIPPED, message="Sync already in progress")

        self._in_flight = True
        try:
            return await self._run()
        finally:
            self._in_flight = False

    async def _run(self) -> SyncResult:
        try:
            payload = await self._source.fetch()
            candidates, skipped = translate_remote_payload(payload)
        except (TransportError, DecodeError) as exc:
            LOGGER.warning("Sync fetch failed: %s", exc)
            return SyncResult(status=SyncStatus.FETCH_FAILED, message=f"Sync failed: {exc}")

        added, durable = self._context.merge(candidates)
        if not added:
            LOGGER.info("Sync complete: no change (%s candidates)", len(candidates))
            return SyncResult(
                status=SyncStatus.NO_CHANGE,
                skipped_items=skipped,
                message="No new quotes from server",
            )

        LOGGER.info("Sync complete: %s new quotes", added)
        message = f"Quotes updated from server ({added} new)"
        if not durable:
            message += "; changes may not survive a restart"
        return SyncResult(
            status=SyncStatus.UPDATED,
            added=added,
            skipped_items=skipped,
            message=message,
            durable=durable,
        )


class SyncScheduler:
    """Runs reconciliation cycles on a fixed interval.

    start() must be called from a running event loop. The first cycle runs
    after one full interval unless run_immediately is set.
    """

    def __init__(
        self,
        reconciler: Reconciler,
        interval_seconds: float,
        on_result: Optional[Callable[[SyncResult], None]] = None,
        run_immediately: bool = False,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._reconciler = reconciler
        self._interval = interval_seconds
        self._on_result = on_result
        self._run_immediately = run_immediately
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())
        LOGGER.info("Sync scheduler started (every %ss)", self._interval)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        LOGGER.info("Sync scheduler stopped")

    async def _loop(self) -> None:
        if not self._run_immediately:
            await asyncio.sleep(self._interval)
        while True:
            result = await self._reconciler.run_cycle()
            self._deliver(result)
            await asyncio.sleep(self._interval)

    def _deliver(self, result: SyncResult) -> None:
        if self._on_result is None:
            return
        try:
            self._on_result(result)
        except Exception:
            LOGGER.exception("Sync result callback failed")
