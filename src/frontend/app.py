"""Main Textual app for the quote viewer."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import httpx
from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Footer, Input, Select, Static

from adapters.files import export_quotes, import_quotes
from adapters.http_source import HttpQuoteSource
from adapters.quote_formatting import format_filter_label, format_quote, format_sync_result
from client import build_http_client, resolve_endpoint
from core.config import SyncConfig
from core.context import QuoteContext
from core.models import ALL_CATEGORIES, Outcome, QuoteRecord, SyncResult, SyncStatus
from core.reconciler import Reconciler, SyncScheduler

from .constants import ACCENT
from .modals import ImportPathScreen
from .state import StatusState


class QuoteBoardApp(App):
    """Quote viewer with filter, add form, import/export and background sync."""

    BINDINGS = [
        ("ctrl+n", "new_quote", "New quote"),
        ("ctrl+s", "sync_now", "Sync"),
        ("ctrl+e", "export", "Export"),
        ("ctrl+o", "import", "Import"),
        ("ctrl+c", "quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def __init__(
        self,
        context: QuoteContext,
        sync_config: SyncConfig,
        export_dir: Path,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.context = context
        self.status_state = StatusState()
        self._sync_config = sync_config
        self._export_dir = export_dir
        self._http: Optional[httpx.AsyncClient] = None
        self._reconciler: Optional[Reconciler] = None
        self._scheduler: Optional[SyncScheduler] = None

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                with Vertical(id="header-right"):
                    yield Static(self._sync_label(), id="sync-label", classes="subtle")

        yield Static("", id="quote-display")

        with Horizontal(id="filter-row"):
            yield Select(
                self._filter_options(),
                value=self.context.active_filter,
                allow_blank=False,
                id="category-filter",
            )
        with Horizontal(id="quote-actions"):
            yield Button("Show New Quote", id="new-quote", variant="primary")
            yield Button("Sync Now", id="sync-now")
            yield Button("Export", id="export-btn")
            yield Button("Import", id="import-btn")
        with Horizontal(id="add-form"):
            yield Input(placeholder="Enter a new quote", id="new-quote-text")
            yield Input(placeholder="Enter quote category", id="new-quote-category")
            yield Button("Add Quote", id="add-quote", variant="success")
        yield Static("", id="status")
        yield Footer()

    def on_mount(self) -> None:
        last = self.context.last_viewed()
        if last is not None:
            self._show(last)
        else:
            self.action_new_quote()

        if self._sync_config.enabled:
            self._http = build_http_client(self._sync_config)
            source = HttpQuoteSource(
                self._http,
                resolve_endpoint(self._sync_config),
                limit=self._sync_config.limit,
            )
            self._reconciler = Reconciler(self.context, source)
            self._scheduler = SyncScheduler(
                self._reconciler,
                self._sync_config.interval_seconds,
                on_result=self._apply_sync_result,
            )
            self._scheduler.start()

    async def on_unmount(self) -> None:
        if self._scheduler is not None:
            await self._scheduler.stop()
        if self._http is not None:
            await self._http.aclose()

    @on(Button.Pressed, "#new-quote")
    def _on_new_quote(self) -> None:
        self.action_new_quote()

    @on(Button.Pressed, "#sync-now")
    def _on_sync_now(self) -> None:
        self.action_sync_now()

    @on(Button.Pressed, "#export-btn")
    def _on_export(self) -> None:
        self.action_export()

    @on(Button.Pressed, "#import-btn")
    def _on_import(self) -> None:
        self.action_import()

    @on(Button.Pressed, "#add-quote")
    @on(Input.Submitted, "#new-quote-category")
    def _on_add_quote(self) -> None:
        text_input = self.query_one("#new-quote-text", Input)
        category_input = self.query_one("#new-quote-category", Input)
        outcome = self.context.add_quote(text_input.value, category_input.value)
        self._set_status(outcome)
        if not outcome.ok:
            return
        text_input.value = ""
        category_input.value = ""
        self._show(outcome.record)
        self._refresh_filter_options()

    @on(Select.Changed, "#category-filter")
    def _on_filter_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        if event.value == self.context.active_filter:
            return
        outcome = self.context.select_category(str(event.value))
        self._set_status(outcome)
        self.action_new_quote()

    def action_new_quote(self) -> None:
        outcome = self.context.show_random()
        self._show(outcome.record)

    def action_sync_now(self) -> None:
        if self._reconciler is None:
            self._set_status(Outcome(ok=False, message="Sync is disabled in config.json"))
            return
        if self.status_state.syncing:
            return
        self.run_worker(self._sync_now(), group="sync")

    async def _sync_now(self) -> None:
        self.status_state.syncing = True
        self._refresh_sync_controls()
        self._set_status(Outcome(ok=True, message="Syncing..."))
        try:
            result = await self._reconciler.run_cycle()
        finally:
            self.status_state.syncing = False
            self._refresh_sync_controls()
        self._apply_sync_result(result)

    def action_export(self) -> None:
        self._set_status(export_quotes(self.context, self._export_dir))

    def action_import(self) -> None:
        self.push_screen(ImportPathScreen(), self._handle_import_path)

    def _handle_import_path(self, path: Optional[Path]) -> None:
        if path is None:
            return
        outcome = import_quotes(self.context, path)
        self._set_status(outcome)
        if outcome.ok:
            self._refresh_filter_options()

    def _apply_sync_result(self, result: SyncResult) -> None:
        ok =result.status is not SyncStatus.FETCH_FAILED
        self._set_status(Outcome(ok=ok, message=format_sync_result(result), durable=result.durable))
        if result.status is SyncStatus.UPDATED:
            self._refresh_filter_options()

    def _show(self, record: Optional[QuoteRecord]) -> None:
        self.query_one("#quote-display", Static).update(format_quote(record))

    def _set_status(self, outcome: Outcome) -> None:
        self.status_state.error = not outcome.ok or not outcome.durable
        status = self.query_one("#status", Static)
        status.remove_class("status-ok", "status-error")
        status.add_class("status-error" if self.status_state.error else "status-ok")
        status.update(outcome.message)

    def _filter_options(self) -> list[tuple[str, str]]:
        options = [(format_filter_label(ALL_CATEGORIES), ALL_CATEGORIES)]
        options.extend((label, label) for label in self.context.categories)
        return options

    def _refresh_filter_options(self) -> None:
        select = self.query_one("#category-filter", Select)
        # Passive refreshes must not count as a user selection.
        with select.prevent(Select.Changed):
            select.set_options(self._filter_options())
            select.value = self.context.active_filter

    def _refresh_sync_controls(self) -> None:
        self.query_one("#sync-now", Button).disabled = self.status_state.syncing
        self.query_one("#sync-label", Static).update(self._sync_label())

    def _sync_label(self) -> str:
        if not self._sync_config.enabled:
            return "sync: off"
        if self.status_state.syncing:
            return "sync: running..."
        return f"sync: every {self._sync_config.interval_seconds:g}s"

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("QUOTE", ACCENT),
            ("BOARD > Quotes", "bold"),
        )
