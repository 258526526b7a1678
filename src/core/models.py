"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any storage or transport specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Filter sentinel meaning "no category filter".
ALL_CATEGORIES = "all"

# Category applied to remote items that carry no body.
DEFAULT_REMOTE_CATEGORY = "General"

# Slot names for the durable and session key/value stores.
QUOTES_SLOT = "quotes"
FILTER_SLOT = "selectedCategory"
POINTER_SLOT = "lastViewedQuoteIndex"


@dataclass(frozen=True)
class QuoteRecord:
    """A single quote. Identity for dedup is the exact (text, category) pair."""

    text: str
    category: str

    def key(self) -> tuple[str, str]:
        return (self.text, self.category)


SEED_QUOTES: tuple[QuoteRecord, ...] = (
    QuoteRecord(
        text="The only limit to our realization of tomorrow is our doubts of today.",
        category="Motivation",
    ),
    QuoteRecord(
        text="Life is what happens when you're busy making other plans.",
        category="Life",
    ),
    QuoteRecord(
        text="Do not take life too seriously. You will never get out of it alive.",
        category="Humor",
    ),
)


@dataclass(frozen=True)
class Selection:
    """A picked record plus its absolute position in the unfiltered store."""

    position: int
    record: QuoteRecord


@dataclass(frozen=True)
class Outcome:
    """Result of a user-facing operation, ready to be shown as a notification."""

    ok: bool
    message: str
    added: int = 0
    durable: bool = True
    record: Optional[QuoteRecord] = None


class SyncStatus(str, Enum):
    UPDATED = "updated"
    NO_CHANGE = "no_change"
    FETCH_FAILED = "fetch_failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one reconciliation cycle."""

    status: SyncStatus
    added: int = 0
    skipped_items: int = 0
    message: str = ""
    durable: bool = True
