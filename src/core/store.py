"""Ordered quote record store with whole-snapshot persistence (core domain).

The store never persists on its own; callers decide when a mutation should
survive a restart by calling persist() explicitly.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from core.errors import DecodeError, PersistenceError
from core.models import QUOTES_SLOT, SEED_QUOTES, QuoteRecord
from core.ports import SlotStorePort
from core.serializer import decode, encode

LOGGER = logging.getLogger(__name__)


class RecordStore:
    """Append-only, insertion-ordered sequence of quote records."""

    def __init__(
        self,
        slots: SlotStorePort,
        seed: Sequence[QuoteRecord] = SEED_QUOTES,
        slot_name: str = QUOTES_SLOT,
    ) -> None:
        self._slots = slots
        self._seed = tuple(seed)
        self._slot_name = slot_name
        self._records: List[QuoteRecord] = []

    def load(self) -> List[QuoteRecord]:
        """Replace the in-memory sequence with the persisted snapshot.

        A missing or malformed snapshot is treated as absent and the seed set
        is used instead. An unreadable slot is treated the same way so a
        broken database never prevents startup.
        """

        raw: Optional[str]
        try:
            raw = self._slots.get(self._slot_name)
        except PersistenceError:
            LOGGER.exception("Could not read snapshot slot %s", self._slot_name)
            raw = None

        if raw is None:
            self._records = list(self._seed)
            return self.records

        try:
            self._records = decode(raw)
        except DecodeError as exc:
            LOGGER.warning("Discarding malformed snapshot: %s", exc)
            self._records = list(self._seed)
        return self.records

    def append(self, record: QuoteRecord) -> None:
        self._records.append(record)

    def append_many(self, records: Iterable[QuoteRecord]) -> int:
        """Append records in order and return how many were appended."""

        count = 0
        for record in records:
            self._records.append(record)
            count += 1
        return count

    def persist(self) -> None:
        """Overwrite the durable snapshot with the full current sequence.

        Raises PersistenceError if the slot write fails; the in-memory
        sequence is left untouched either way.
        """

        payload = encode(self._records).decode("utf-8")
        self._slots.set(self._slot_name, payload)
        LOGGER.debug("Persisted %s quotes", len(self._records))

    def contains(self, record: QuoteRecord) -> bool:
        """Exact (text, category) membership over the entire current store."""

        key = record.key()
        return any(existing.key() == key for existing in self._records)

    def get(self, position: int) -> Optional[QuoteRecord]:
        if 0 <= position < len(self._records):
            return self._records[position]
        return None

    @property
    def records(self) -> List[QuoteRecord]:
        """Return a copy so callers cannot bypass the mutation contract."""

        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[QuoteRecord]:
        return iter(list(self._records))
