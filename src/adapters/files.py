"""Export and import file helpers.

Both helpers return an Outcome so the CLI and the TUI report file problems
the same way they report decode problems.
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.context import QuoteContext
from core.models import Outcome

LOGGER = logging.getLogger(__name__)

EXPORT_FILENAME = "quotes.json"


def export_quotes(context: QuoteContext, directory: Path) -> Outcome:
    """Write the current collection to <directory>/quotes.json."""

    path = directory / EXPORT_FILENAME
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_bytes(context.export_payload() + b"\n")
    except OSError as exc:
        LOGGER.error("Export to %s failed: %s", path, exc)
        return Outcome(ok=False, message=f"Export failed: {exc.strerror or exc}")
    count = len(context.records)
    LOGGER.info("Exported %s quotes to %s", count, path)
    return Outcome(ok=True, message=f"Exported {count} quotes to {path}")


def import_quotes(context: QuoteContext, path: Path) -> Outcome:
    """Read a user-supplied JSON file and append its quotes."""

    try:
        payload = path.read_bytes()
    except OSError as exc:
        return Outcome(ok=False, message=f"Import failed: {exc.strerror or exc}")
    return context.import_payload(payload)
