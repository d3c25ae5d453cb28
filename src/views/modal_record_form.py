from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Input, Label


@dataclass(frozen=True)
class FormField:
    key: str  # key as sent to the server
    label: str
    kind: Literal["text", "integer", "number", "bool"] = "text"


class RecordFormModal(ModalScreen[Optional[Dict[str, Any]]]):
    """
    Create/edit form for one record.
    Dismisses with the wire fields to send, or None when cancelled.
    """

    DEFAULT_CSS = """
    RecordFormModal {
        align: center middle;
    }
    #div-form {
        width: 70;
        height: auto;
        background: $surface;
        padding: 1 2;
    }
    """

    def __init__(
        self,
        title: str,
        form_fields: List[FormField],
        initial: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__()
        self._title = title
        self._fields = form_fields
        self._initial = initial or {}

    def compose(self) -> ComposeResult:
        with Vertical(id="div-form"):
            yield Label(f"[b]{self._title}[/b]")
            for f in self._fields:
                value = self._initial.get(f.key)
                if f.kind == "bool":
                    yield Checkbox(f.label, value=bool(value), id=f"input-{f.key}")
                    continue
                yield Label(f.label)
                yield Input(
                    "" if value is None else str(value),
                    id=f"input-{f.key}",
                    type=f.kind,
                )
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save", id="btn-save", variant="primary")

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    def collect(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for f in self._fields:
            widget = self.query_one(f"#input-{f.key}")
            if f.kind == "bool":
                values[f.key] = widget.value
                continue
            raw = widget.value.strip()
            if not raw:
                continue
            try:
                if f.kind == "integer":
                    values[f.key] = int(raw)
                elif f.kind == "number":
                    values[f.key] = float(raw)
                else:
                    values[f.key] = raw
            except ValueError:
                # half-typed numbers such as "-" are left out
                continue
        return values

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(None)

    @on(Button.Pressed, "#btn-save")
    def handle_save(self) -> None:
        self.dismiss(self.collect())
