"""Shared display formatting helpers.

Keeping formatting here prevents drift between the CLI and the TUI.
"""

from __future__ import annotations

from typing import Optional

from core.context import NO_QUOTES_MESSAGE
from core.models import ALL_CATEGORIES, QuoteRecord, SyncResult, SyncStatus


def format_quote(record: Optional[QuoteRecord]) -> str:
    """Return the display line for a quote, or the empty-state message."""

    if record is None:
        return NO_QUOTES_MESSAGE
    return f"\"{record.text}\" — {record.category}"


def format_filter_label(value: str) -> str:
    if value == ALL_CATEGORIES:
        return "All Categories"
    return value


def format_sync_result(result: SyncResult) -> str:
    """Return a one-line summary suitable for a status bar or log line."""

    if result.status is SyncStatus.UPDATED:
        text = result.message or f"{result.added} new quotes"
    elif result.status is SyncStatus.NO_CHANGE:
        text = result.message or "No new quotes from server"
    elif result.status is SyncStatus.SKIPPED:
        text = result.message or "Sync already in progress"
    else:
        text = result.message or "Sync failed"

    if result.skipped_items:
        text += f" ({result.skipped_items} malformed items ignored)"
    return text
