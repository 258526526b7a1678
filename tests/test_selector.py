from __future__ import annotations

import random
from typing import Optional

import pytest

from core.errors import NoQuotesAvailable
from core.models import ALL_CATEGORIES, POINTER_SLOT, QuoteRecord
from core.selector import Selector, pick_random


class FixedRandom:
    def __init__(self, index: int) -> None:
        self.index = index
        self.stops: list[int] = []

    def randrange(self, stop: int) -> int:
        self.stops.append(stop)
        return self.index


class FakeSlots:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    def get(self, name: str) -> Optional[str]:
        return self.values.get(name)

    def set(self, name: str, value: str) -> None:
        self.values[name] = value

    def delete(self, name: str) -> None:
        self.values.pop(name, None)


RECORDS = [
    QuoteRecord("a", "Life"),
    QuoteRecord("b", "Humor"),
    QuoteRecord("c", "Life"),
    QuoteRecord("d", "humor"),
]


def test_pick_all_draws_over_whole_store() -> None:
    rng = FixedRandom(3)
    selection = pick_random(RECORDS, ALL_CATEGORIES, rng)
    assert rng.stops == [4]
    assert selection.record == QuoteRecord("d", "humor")
    assert selection.position == 3


def test_pick_filtered_reports_unfiltered_position() -> None:
    rng = FixedRandom(1)
    selection = pick_random(RECORDS, "Life", rng)
    assert rng.stops == [2]
    assert selection.record == QuoteRecord("c", "Life")
    assert selection.position == 2


def test_pick_filter_is_case_sensitive() -> None:
    seeded = random.Random(7)
    for _ in range(50):
        assert pick_random(RECORDS, "Humor", seeded).record == QuoteRecord("b", "Humor")


def test_pick_only_returns_store_members() -> None:
    seeded = random.Random(42)
    for _ in range(50):
        assert pick_random(RECORDS, ALL_CATEGORIES, seeded).record in RECORDS


def test_pick_signals_none_available() -> None:
    with pytest.raises(NoQuotesAvailable):
        pick_random(RECORDS, "Sports", FixedRandom(0))
    with pytest.raises(NoQuotesAvailable):
        pick_random([], ALL_CATEGORIES, FixedRandom(0))


def test_selector_records_pointer() -> None:
    session = FakeSlots()
    selector = Selector(session, rng=FixedRandom(0))
    selector.pick(RECORDS, "Humor")
    assert session.values[POINTER_SLOT] == "1"
    assert selector.last_position() == 1


def test_selector_ignores_invalid_pointer() -> None:
    session = FakeSlots()
    session.values[POINTER_SLOT] = "abc"
    assert Selector(session).last_position() is None
