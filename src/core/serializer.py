"""JSON encoding and decoding of quote records (core domain)."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Tuple

from core.errors import DecodeError, RemoteItemError
from core.models import DEFAULT_REMOTE_CATEGORY, QuoteRecord

LOGGER = logging.getLogger(__name__)


def encode(records: Iterable[QuoteRecord]) -> bytes:
    """Return a stable, human-readable JSON array of records.

    Field order is always text then category, so exports and the durable
    snapshot diff cleanly.
    """

    payload = [{"text": record.text, "category": record.category} for record in records]
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def _decode_element(index: int, element: Any) -> QuoteRecord:
    if not isinstance(element, dict):
        raise DecodeError(f"item {index} is not an object")
    text = element.get("text")
    category = element.get("category")
    if not isinstance(text, str) or not text.strip():
        raise DecodeError(f"item {index} has no text")
    if not isinstance(category, str) or not category.strip():
        raise DecodeError(f"item {index} has no category")
    return QuoteRecord(text=text, category=category)


def decode(payload: bytes | str) -> List[QuoteRecord]:
    """Parse a JSON array of records.

    Any problem fails the whole payload with DecodeError, so an import either
    applies completely or not at all.
    """

    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise DecodeError("Invalid JSON format: expected an array of quotes")

    return [_decode_element(index, element) for index, element in enumerate(data)]


def translate_remote_item(item: Any) -> QuoteRecord:
    """Map one remote item to a record.

    Contract:
    - title (required, non-empty string) becomes text
    - body (optional) becomes category; absent or empty falls back to "General"
    """

    if not isinstance(item, dict):
        raise RemoteItemError("remote item is not an object")

    title = item.get("title")
    if not isinstance(title, str) or not title.strip():
        raise RemoteItemError("remote item has no title")

    body = item.get("body")
    if body is None or body == "":
        category = DEFAULT_REMOTE_CATEGORY
    elif isinstance(body, str):
        category = body
    else:
        raise RemoteItemError("remote item body is not a string")

    return QuoteRecord(text=title, category=category)


def translate_remote_payload(payload: Any) -> Tuple[List[QuoteRecord], int]:
    """Translate a decoded remote payload, skipping malformed items.

    Returns the translated records in payload order and the number of items
    that were skipped.
    """

    if not isinstance(payload, list):
        raise DecodeError("remote payload is not an array")

    records: List[QuoteRecord] = []
    skipped = 0
    for index, item in enumerate(payload):
        try:
            records.append(translate_remote_item(item))
        except RemoteItemError as exc:
            skipped += 1
            LOGGER.warning("Skipping remote item %s: %s", index, exc)
    return records, skipped
