from __future__ import annotations

from adapters.quote_formatting import format_filter_label, format_quote, format_sync_result
from core.models import ALL_CATEGORIES, QuoteRecord, SyncResult, SyncStatus


def test_format_quote() -> None:
    assert format_quote(QuoteRecord("Be kind.", "Life")) == "\"Be kind.\" — Life"


def test_format_quote_empty_state() -> None:
    assert format_quote(None) == "No quotes available!"


def test_format_filter_label() -> None:
    assert format_filter_label(ALL_CATEGORIES) == "All Categories"
    assert format_filter_label("Humor") == "Humor"


def test_format_sync_result_mentions_skipped_items() -> None:
    result = SyncResult(status=SyncStatus.NO_CHANGE, skipped_items=2)
    assert format_sync_result(result) == "No new quotes from server (2 malformed items ignored)"


def test_format_sync_result_failure_uses_message() -> None:
    result = SyncResult(status=SyncStatus.FETCH_FAILED, message="Sync failed: timed out")
    assert format_sync_result(result) == "Sync failed: timed out"
