"""Owning state object for the quote collection.

QuoteContext is created once at startup and is the only thing allowed to
mutate the store. Every user-facing operation catches its own error kinds and
returns an Outcome, so nothing here can take the process down.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from core.categories import CategoryIndex
from core.errors import DecodeError, NoQuotesAvailable, PersistenceError, ValidationError
from core.models import SEED_QUOTES, Outcome, QuoteRecord
from core.ports import SlotStorePort
from core.selector import RandomSource, Selector
from core.serializer import decode, encode
from core.store import RecordStore

LOGGER = logging.getLogger(__name__)

NO_QUOTES_MESSAGE = "No quotes available!"
NOT_DURABLE_SUFFIX = "; the change may not survive a restart"


def validate_quote(text: str, category: str) -> QuoteRecord:
    """Trim user input and build a record, rejecting empty fields."""

    text = text.strip()
    category = category.strip()
    if not text or not category:
        raise ValidationError("Please enter both a quote and a category.")
    return QuoteRecord(text=text, category=category)


class QuoteContext:
    """Store, category index and selector behind a single mutation surface."""

    def __init__(self, store: RecordStore, index: CategoryIndex, selector: Selector) -> None:
        self._store = store
        self._index = index
        self._selector = selector

    @classmethod
    def create(
        cls,
        durable: SlotStorePort,
        session: SlotStorePort,
        rng: Optional[RandomSource] = None,
        seed: Sequence[QuoteRecord] = SEED_QUOTES,
    ) -> "QuoteContext":
        return cls(
            store=RecordStore(durable, seed=seed),
            index=CategoryIndex(durable),
            selector=Selector(session, rng=rng),
        )

    @property
    def records(self) -> List[QuoteRecord]:
        return self._store.records

    @property
    def categories(self) -> List[str]:
        return self._index.labels

    @property
    def active_filter(self) -> str:
        return self._index.active

    def startup(self) -> None:
        """Load the snapshot, build the index and restore the saved filter."""

        self._store.load()
        self._index.refresh(self._store.records)
        self._index.restore()
        LOGGER.info(
            "Loaded %s quotes in %s categories (filter: %s)",
            len(self._store),
            len(self._index.labels),
            self._index.active,
        )

    def _persist(self) -> bool:
        try:
            self._store.persist()
        except PersistenceError:
            LOGGER.exception("Failed to persist quotes")
            return False
        return True

    def add_quote(self, text: str, category: str) -> Outcome:
        try:
            record = validate_quote(text, category)
        except ValidationError as exc:
            return Outcome(ok=False, message=str(exc))

        self._store.append(record)
        durable = self._persist()
        self._index.refresh(self._store.records)
        self._selector.remember(len(self._store) - 1)
        LOGGER.info("Added quote in %s", record.category)

        message = "Quote added successfully!"
        if not durable:
            message += NOT_DURABLE_SUFFIX
        return Outcome(ok=True, message=message, added=1, durable=durable, record=record)

    def select_category(self, requested: str) -> Outcome:
        try:
            effective = self._index.select(requested)
        except PersistenceError:
            LOGGER.exception("Failed to persist filter preference")
            effective = self._index.active
            return Outcome(
                ok=True,
                message=f"Filter set to {effective}{NOT_DURABLE_SUFFIX}",
                durable=False,
            )
        return Outcome(ok=True, message=f"Filter set to {effective}")

    def show_random(self) -> Outcome:
        try:
            selection = self._selector.pick(self._store.records, self._index.active)
        except NoQuotesAvailable:
            return Outcome(ok=False, message=NO_QUOTES_MESSAGE)
        return Outcome(ok=True, message="", record=selection.record)

    def last_viewed(self) -> Optional[QuoteRecord]:
        """Return the record shown last in this session, if it still exists."""

        position = self._selector.last_position()
        if position is None:
            return None
        return self._store.get(position)

    def merge(self, candidates: Sequence[QuoteRecord]) -> Tuple[int, bool]:
        """Append candidates not already present and return (added, durable).

        Membership is tested against the whole store as it is right now plus
        candidates staged earlier in the same batch. Nothing is written when
        no candidate is new.
        """

        staged: List[QuoteRecord] = []
        staged_keys: set[tuple[str, str]] = set()
        for candidate in candidates:
            key = candidate.key()
            if key in staged_keys or self._store.contains(candidate):
                continue
            staged_keys.add(key)
            staged.append(candidate)

        if not staged:
            return 0, True

        added = self._store.append_many(staged)
        durable = self._persist()
        self._index.refresh(self._store.records)
        return added, durable

    def export_payload(self) -> bytes:
        return encode(self._store.records)

    def import_payload(self, payload: bytes | str) -> Outcome:
        """Append every decoded record, without deduplication."""

        try:
            records = decode(payload)
        except DecodeError as exc:
            LOGGER.warning("Import rejected: %s", exc)
            return Outcome(ok=False, message=f"Import failed: {exc}")

        added = self._store.append_many(records)
        durable = self._persist()
        self._index.refresh(self._store.records)
        LOGGER.info("Imported %s quotes", added)

        message = f"Quotes imported successfully! ({added} added)"
        if not durable:
            message += NOT_DURABLE_SUFFIX
        return Outcome(ok=True, message=message, added=added, durable=durable)
