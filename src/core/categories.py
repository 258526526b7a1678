"""Category index and filter resolution (core domain)."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from core.errors import PersistenceError
from core.models import ALL_CATEGORIES, FILTER_SLOT, QuoteRecord
from core.ports import SlotStorePort

LOGGER = logging.getLogger(__name__)


def rebuild(records: Iterable[QuoteRecord]) -> List[str]:
    """Return distinct categories in first-seen order (exact string equality)."""

    seen: set[str] = set()
    labels: List[str] = []
    for record in records:
        if record.category in seen:
            continue
        seen.add(record.category)
        labels.append(record.category)
    return labels


def resolve_filter(requested: Optional[str], known: Iterable[str]) -> str:
    """Return the requested filter if it is usable, otherwise the "all" sentinel."""

    if requested == ALL_CATEGORIES:
        return ALL_CATEGORIES
    if requested is not None and requested in set(known):
        return requested
    return ALL_CATEGORIES


class CategoryIndex:
    """Derived category labels plus the currently active filter.

    Labels are replaced wholesale on every refresh. The filter preference is
    only written back on explicit user selection, never on a passive refresh.
    """

    def __init__(self, preferences: SlotStorePort, slot_name: str = FILTER_SLOT) -> None:
        self._preferences = preferences
        self._slot_name = slot_name
        self._labels: List[str] = []
        self._active = ALL_CATEGORIES

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    @property
    def active(self) -> str:
        return self._active

    def refresh(self, records: Iterable[QuoteRecord]) -> List[str]:
        """Rebuild labels and re-validate the active filter against them."""

        self._labels = rebuild(records)
        self._active = resolve_filter(self._active, self._labels)
        return self.labels

    def restore(self) -> str:
        """Apply the persisted filter preference, falling back to "all"."""

        try:
            stored = self._preferences.get(self._slot_name)
        except PersistenceError:
            LOGGER.exception("Could not read filter preference")
            stored = None
        self._active = resolve_filter(stored, self._labels)
        if stored is not None and self._active != stored:
            LOGGER.info("Stored filter %r is no longer known, using %r", stored, self._active)
        return self._active

    def select(self, requested: str) -> str:
        """Resolve an explicit user selection and persist it as the preference.

        The in-memory filter is updated before the write, so a PersistenceError
        raised here leaves the session filter applied.
        """

        self._active = resolve_filter(requested, self._labels)
        self._preferences.set(self._slot_name, self._active)
        return self._active
