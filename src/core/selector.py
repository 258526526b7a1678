"""Filtered random selection (core domain)."""

from __future__ import annotations

import logging
import random
from typing import Optional, Protocol, Sequence

from core.errors import NoQuotesAvailable
from core.models import ALL_CATEGORIES, POINTER_SLOT, QuoteRecord, Selection
from core.ports import SlotStorePort

LOGGER = logging.getLogger(__name__)


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


def pick_random(
    records: Sequence[QuoteRecord],
    active_filter: str,
    rng: RandomSource,
) -> Selection:
    """Draw one record uniformly among those matching the filter.

    The returned position refers to the unfiltered sequence, so the same
    record can be found again after the filter changes.
    """

    candidates = [
        (position, record)
        for position, record in enumerate(records)
        if active_filter == ALL_CATEGORIES or record.category == active_filter
    ]
    if not candidates:
        raise NoQuotesAvailable(f"No quotes available for {active_filter!r}")

    position, record = candidates[rng.randrange(len(candidates))]
    return Selection(position=position, record=record)


class Selector:
    """Random picker that remembers the last shown record for the session."""

    def __init__(
        self,
        session: SlotStorePort,
        rng: Optional[RandomSource] = None,
        slot_name: str = POINTER_SLOT,
    ) -> None:
        self._session = session
        self._rng = rng or random.Random()
        self._slot_name = slot_name

    def pick(self, records: Sequence[QuoteRecord], active_filter: str) -> Selection:
        selection = pick_random(records, active_filter, self._rng)
        self.remember(selection.position)
        return selection

    def remember(self, position: int) -> None:
        self._session.set(self._slot_name, str(position))

    def last_position(self) -> Optional[int]:
        raw = self._session.get(self._slot_name)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            LOGGER.debug("Ignoring invalid selection pointer %r", raw)
            return None
