"""Modal dialogs for the Textual quote viewer."""

from __future__ import annotations

from pathlib import Path

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static


class ImportPathScreen(ModalScreen[Path | None]):
    """Modal form asking for the JSON file to import."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Import quotes", classes="modal-title"),
            Static("", id="import-error", classes="modal-error"),
            Static("file path", classes="form-label"),
            Input(placeholder="exports/quotes.json", id="import-path"),
            Horizontal(
                Button("Import", id="import-confirm", variant="success"),
                Button("Cancel", id="import-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog",
        )

    def on_mount(self) -> None:
        self.query_one("#import-path", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "import-confirm":
            self._submit()
        else:
            self.dismiss(None)

    def _submit(self) -> None:
        raw_value = self.query_one("#import-path", Input).value.strip()
        if not raw_value:
            self.query_one("#import-error", Static).update("file path is required")
            return
        path = Path(raw_value).expanduser()
        if not path.is_file():
            self.query_one("#import-error", Static).update(f"not a file: {path}")
            return
        self.dismiss(path)
