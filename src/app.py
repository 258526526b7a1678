"""Application entry point for quoteboard."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.files import export_quotes, import_quotes
from adapters.http_source import HttpQuoteSource
from adapters.memory_slots import MemorySlotStore
from adapters.quote_formatting import format_filter_label, format_quote, format_sync_result
from adapters.sqlite_slots import SQLiteSlotStore
from client import build_http_client, resolve_endpoint
from core.context import QuoteContext
from core.errors import PersistenceError
from core.models import Outcome, SyncResult
from core.reconciler import Reconciler, SyncScheduler

NAME = "QUOTEBOARD"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(force_console: bool = False) -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    # The TUI owns the terminal, so console logging is only forced for the
    # headless watcher.
    if force_console or config.get("console", False):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/quoteboard.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _open_durable_store(db_path: str) -> SQLiteSlotStore:
    """Open the SQLite slot store, degrading to a non-durable session on failure.

    A store that could not be initialised still satisfies the port: reads fail
    and fall back to the seed set, writes come back as durable=False.
    """

    durable = SQLiteSlotStore(db_path)
    try:
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        durable.init_db()
    except (OSError, PersistenceError):
        logging.getLogger(__name__).exception(
            "Could not open %s; changes will not survive a restart", db_path
        )
    return durable


def _build_context(db_path: Optional[str] = None) -> QuoteContext:
    durable = _open_durable_store(db_path or settings.STORAGE.db_path)
    context = QuoteContext.create(durable=durable, session=MemorySlotStore())
    context.startup()
    return context


def _report(outcome: Outcome) -> None:
    print(outcome.message)


def _print_sync(result: SyncResult) -> None:
    print(format_sync_result(result))


def _random(category: Optional[str]) -> None:
    context = _build_context()
    if category is not None:
        outcome = context.select_category(category)
        if context.active_filter != category:
            print(f"Unknown category {category!r}, showing all categories")
        elif not outcome.durable:
            _report(outcome)
    outcome = context.show_random()
    print(format_quote(outcome.record))


def _add(text: str, category: str) -> None:
    context = _build_context()
    outcome = context.add_quote(text, category)
    _report(outcome)
    if outcome.record is not None:
        print(format_quote(outcome.record))


def _categories() -> None:
    context = _build_context()
    active = context.active_filter
    print(f"filter: {format_filter_label(active)}")
    for label in context.categories:
        marker = "*" if label == active else " "
        print(f"{marker} {label}")


def _export(out: Optional[str]) -> None:
    context = _build_context()
    directory = Path(out) if out else Path(settings.EXPORT_DIR)
    _report(export_quotes(context, directory))


def _import(path: str) -> None:
    context = _build_context()
    _report(import_quotes(context, Path(path)))


async def _sync_once(context: QuoteContext) -> SyncResult:
    async with build_http_client(settings.SYNC) as client:
        source = HttpQuoteSource(client, resolve_endpoint(settings.SYNC), limit=settings.SYNC.limit)
        return await Reconciler(context, source).run_cycle()


def _sync() -> None:
    context = _build_context()
    _print_sync(asyncio.run(_sync_once(context)))


def _watch() -> None:
    _print_banner()
    logger = logging.getLogger(__name__)
    context = _build_context()

    async def _run_watch() -> None:
        async with build_http_client(settings.SYNC) as client:
            source = HttpQuoteSource(client, resolve_endpoint(settings.SYNC), limit=settings.SYNC.limit)
            scheduler = SyncScheduler(
                Reconciler(context, source),
                settings.SYNC.interval_seconds,
                on_result=_print_sync,
                run_immediately=True,
            )
            scheduler.start()
            logger.info("Watching %s. Press Ctrl+C to stop.", resolve_endpoint(settings.SYNC))
            try:
                await asyncio.Event().wait()
            finally:
                await scheduler.stop()

    try:
        asyncio.run(_run_watch())
    except KeyboardInterrupt:
        logger.info("Watcher stopped")


def _ui() -> None:
    from frontend.app import QuoteBoardApp

    context = _build_context()
    QuoteBoardApp(
        context,
        sync_config=settings.SYNC,
        export_dir=Path(settings.EXPORT_DIR),
    ).run()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="quoteboard")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("ui", help="Launch the quote viewer TUI")
    random_parser = subparsers.add_parser("random", help="Print a random quote")
    random_parser.add_argument("--category", help="Only pick from this category")
    add_parser = subparsers.add_parser("add", help="Add a quote")
    add_parser.add_argument("text")
    add_parser.add_argument("category")
    subparsers.add_parser("categories", help="List known categories")
    export_parser = subparsers.add_parser("export", help="Export quotes to quotes.json")
    export_parser.add_argument("--out", help="Target directory (default: export.directory)")
    import_parser = subparsers.add_parser("import", help="Import quotes from a JSON file")
    import_parser.add_argument("file")
    subparsers.add_parser("sync", help="Run one sync cycle against the remote source")
    subparsers.add_parser("watch", help="Sync periodically until interrupted")

    args = parser.parse_args(argv)
    _configure_logging(force_console=args.command == "watch")

    if args.command == "random":
        _random(args.category)
        return
    if args.command == "add":
        _add(args.text, args.category)
        return
    if args.command == "categories":
        _categories()
        return
    if args.command == "export":
        _export(args.out)
        return
    if args.command == "import":
        _import(args.file)
        return
    if args.command == "sync":
        _sync()
        return
    if args.command == "watch":
        _watch()
        return
    _print_banner()
    _ui()


if __name__ == "__main__":
    main()
