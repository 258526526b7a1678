from __future__ import annotations

import asyncio
from typing import Any, Optional

from core.context import QuoteContext
from core.errors import DecodeError, PersistenceError, TransportError
from core.models import QUOTES_SLOT, QuoteRecord, SyncResult, SyncStatus
from core.reconciler import Reconciler, SyncScheduler
from core.serializer import decode


class FakeSlots:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.writes: list[str] = []

    def get(self, name: str) -> Optional[str]:
        return self.values.get(name)

    def set(self, name: str, value: str) -> None:
        self.writes.append(name)
        self.values[name] = value

    def delete(self, name: str) -> None:
        self.values.pop(name, None)


class FailingWrites(FakeSlots):
    def set(self, name: str, value: str) -> None:
        raise PersistenceError("disk full")


class FakeSource:
    def __init__(self, payload: Any = None, error: Optional[Exception] = None) -> None:
        self.payload = payload
        self.error = error
        self.calls = 0

    async def fetch(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


class GatedSource(FakeSource):
    """Blocks fetch() until released, to interleave user actions."""

    def __init__(self, payload: Any) -> None:
        super().__init__(payload)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def fetch(self) -> Any:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return self.payload


LIFE = QuoteRecord("Life is short", "Life")
SCENARIO_PAYLOAD = [
    {"title": "Life is short", "body": "Life"},
    {"title": "New one", "body": ""},
]


def _context(*seed: QuoteRecord, durable: Optional[FakeSlots] = None) -> QuoteContext:
    context = QuoteContext.create(durable=durable or FakeSlots(), session=FakeSlots(), seed=seed)
    context.startup()
    return context


def test_scenario_duplicate_skipped_and_default_category() -> None:
    durable = FakeSlots()
    context = _context(LIFE, durable=durable)
    reconciler = Reconciler(context, FakeSource(SCENARIO_PAYLOAD))

    result = asyncio.run(reconciler.run_cycle())

    assert result.status is SyncStatus.UPDATED
    assert result.added == 1
    assert context.records == [LIFE, QuoteRecord("New one", "General")]
    assert decode(durable.values[QUOTES_SLOT]) == context.records
    assert context.categories == ["Life", "General"]


def test_merge_keeps_memory_when_persist_fails() -> None:
    context = _context(LIFE, durable=FailingWrites())
    reconciler = Reconciler(context, FakeSource(SCENARIO_PAYLOAD))

    result = asyncio.run(reconciler.run_cycle())

    assert result.status is SyncStatus.UPDATED
    assert result.added == 1
    assert result.durable is False
    assert "may not survive a restart" in result.message
    assert context.records == [LIFE, QuoteRecord("New one", "General")]
    assert "General" in context.categories


def test_merge_is_idempotent() -> None:
    durable = FakeSlots()
    context = _context(LIFE, durable=durable)
    reconciler = Reconciler(context, FakeSource(SCENARIO_PAYLOAD))

    first = asyncio.run(reconciler.run_cycle())
    writes_after_first = len(durable.writes)
    second = asyncio.run(reconciler.run_cycle())

    assert first.added == 1
    assert second.status is SyncStatus.NO_CHANGE
    assert second.added == 0
    assert len(durable.writes) == writes_after_first
    assert len(context.records) == 2


def test_merge_never_moves_or_edits_existing_records() -> None:
    existing = [QuoteRecord("a", "X"), QuoteRecord("b", "Y"), QuoteRecord("a", "X")]
    context = _context(*existing)
    payload = [{"title": "c", "body": "Z"}, {"title": "a", "body": "X"}, {"title": "b"}]

    asyncio.run(Reconciler(context, FakeSource(payload)).run_cycle())

    assert context.records[: len(existing)] == existing
    assert context.records[len(existing):] == [QuoteRecord("c", "Z"), QuoteRecord("b", "General")]


def test_transport_failure_is_reported_without_mutation() -> None:
    durable = FakeSlots()
    context = _context(LIFE, durable=durable)
    reconciler = Reconciler(context, FakeSource(error=TransportError("timed out")))

    result = asyncio.run(reconciler.run_cycle())

    assert result.status is SyncStatus.FETCH_FAILED
    assert "timed out" in result.message
    assert context.records == [LIFE]
    assert durable.writes == []
    assert not reconciler.in_flight


def test_undecodable_payload_is_reported_without_mutation() -> None:
    context = _context(LIFE)
    for source in (FakeSource({"title": "x"}), FakeSource(error=DecodeError("not JSON"))):
        result = asyncio.run(Reconciler(context, source).run_cycle())
        assert result.status is SyncStatus.FETCH_FAILED
    assert context.records == [LIFE]


def test_malformed_items_are_skipped_individually() -> None:
    context = _context(LIFE)
    payload = [{"id": 1}, {"title": "ok", "body": "Fine"}, "junk"]

    result = asyncio.run(Reconciler(context, FakeSource(payload)).run_cycle())

    assert result.status is SyncStatus.UPDATED
    assert result.skipped_items == 2
    assert context.records == [LIFE, QuoteRecord("ok", "Fine")]


def test_merge_reads_store_after_fetch_returns() -> None:
    context = _context(LIFE)
    source = GatedSource([{"title": "Typed meanwhile", "body": "Now"}, {"title": "Remote", "body": "R"}])
    reconciler = Reconciler(context, source)

    async def scenario() -> SyncResult:
        cycle = asyncio.create_task(reconciler.run_cycle())
        await source.started.wait()
        context.add_quote("Typed meanwhile", "Now")
        source.release.set()
        return await cycle

    result = asyncio.run(scenario())

    assert result.added == 1
    assert context.records == [
        LIFE,
        QuoteRecord("Typed meanwhile", "Now"),
        QuoteRecord("Remote", "R"),
    ]


def test_in_flight_guard_skips_overlapping_cycle() -> None:
    context = _context(LIFE)
    source = GatedSource([{"title": "Remote", "body": "R"}])
    reconciler = Reconciler(context, source)

    async def scenario() -> tuple[SyncResult, SyncResult]:
        first = asyncio.create_task(reconciler.run_cycle())
        await source.started.wait()
        second = await reconciler.run_cycle()
        source.release.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert second.status is SyncStatus.SKIPPED
    assert first.added == 1
    assert source.calls == 1
    assert context.records.count(QuoteRecord("Remote", "R")) == 1


def test_scheduler_runs_cycles_until_stopped() -> None:
    context = _context(LIFE)
    source = FakeSource(SCENARIO_PAYLOAD)
    results: list[SyncResult] = []

    async def scenario() -> bool:
        scheduler = SyncScheduler(
            Reconciler(context, source),
            interval_seconds=0.01,
            on_result=results.append,
            run_immediately=True,
        )
        scheduler.start()
        while len(results) < 3:
            await asyncio.sleep(0.01)
        await scheduler.stop()
        return scheduler.running

    still_running = asyncio.run(scenario())

    assert not still_running
    assert results[0].status is SyncStatus.UPDATED
    assert all(result.status is SyncStatus.NO_CHANGE for result in results[1:])
    assert len(context.records) == 2


def test_scheduler_survives_failing_callback() -> None:
    context = _context(LIFE)
    calls: list[SyncResult] = []

    def explode(result: SyncResult) -> None:
        calls.append(result)
        raise RuntimeError("ui gone")

    async def scenario() -> None:
        scheduler = SyncScheduler(
            Reconciler(context, FakeSource([])),
            interval_seconds=0.01,
            on_result=explode,
            run_immediately=True,
        )
        scheduler.start()
        while len(calls) < 2:
            await asyncio.sleep(0.01)
        await scheduler.stop()

    asyncio.run(scenario())
    assert len(calls) >= 2
