from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.coordinate import Coordinate
from textual.widgets import DataTable, Label, LoadingIndicator

from client.http import ApiError
from client.models import to_wire
from client.session import CollectionSession, SessionSnapshot, SessionState
from utils.messages import SessionChangedMessage
from utils.pure import record_row
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal, ErrorDialogModal
from views.modal_record_form import FormField, RecordFormModal


class CollectionScreen(BaseScreen):
    """
    Table view over one data session.

    The screen never edits rows itself: it renders whatever snapshot the
    session last published, and routes refresh/create/edit/delete to it.
    """

    BINDINGS = [
        Binding("r", "refresh", "Refresh", show=True),
        Binding("n", "create", "New", show=True),
        Binding("e", "edit", "Edit", show=True),
        Binding("delete", "delete", "Delete", show=True),
    ]

    record_type: type = None
    form_fields: List[FormField] = []
    noun = "record"

    def __init__(self):
        super().__init__()
        self.session: Optional[CollectionSession] = None
        self._unsubscribe = None

    def make_session(self) -> CollectionSession:
        raise NotImplementedError

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield from self.compose_controls()
        yield LoadingIndicator(id="loading")
        yield Label("", id="label-error")
        yield DataTable(id="table-records")

    def compose_controls(self) -> ComposeResult:
        yield from ()

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns(*[f.name for f in dataclasses.fields(self.record_type)])

        # session creation triggers the one automatic fetch
        self.session = self.make_session()
        self._unsubscribe = self.session.subscribe(
            lambda snapshot: self.post_message(SessionChangedMessage(snapshot))
        )
        self.render_snapshot(self.session.snapshot)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
        if self.session:
            self.session.close()

    @on(SessionChangedMessage)
    def handle_session_changed(self, message: SessionChangedMessage) -> None:
        self.render_snapshot(message.snapshot)

    def render_snapshot(self, snapshot: SessionSnapshot) -> None:
        self.query_one("#loading").display = snapshot.loading
        error_label = self.query_one("#label-error", Label)
        error_label.update(f"[red]{snapshot.error}[/red]" if snapshot.error else "")
        error_label.display = snapshot.state == SessionState.ERRORED

        table = self.query_one(DataTable)
        table.clear()
        for record in snapshot.items:
            table.add_row(*record_row(record), key=str(record.id))

    def selected_record(self):
        table = self.query_one(DataTable)
        if not self.session or not self.session.items or table.cursor_row < 0:
            return None
        row_key = table.coordinate_to_cell_key(Coordinate(table.cursor_row, 0)).row_key
        for record in self.session.items:
            if str(record.id) == row_key.value:
                return record
        return None

    async def report(self, error: ApiError) -> None:
        await self.app.push_screen_wait(ErrorDialogModal(error.message))

    @work(group="fetch")
    async def action_refresh(self) -> None:
        await self.session.refetch()

    @work
    async def action_create(self) -> None:
        fields: Optional[Dict[str, Any]] = await self.app.push_screen_wait(
            RecordFormModal(f"New {self.noun}", self.form_fields)
        )
        if fields is None:
            return
        try:
            await self.session.create(self.prepare_create(fields))
        except ApiError as e:
            await self.report(e)
            return
        self.notify(f"{self.noun.capitalize()} created.")

    def prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return fields

    @work
    async def action_edit(self) -> None:
        record = self.selected_record()
        if record is None:
            return
        current = to_wire(dataclasses.asdict(record))
        fields = await self.app.push_screen_wait(
            RecordFormModal(f"Edit {self.noun} {record.id}", self.form_fields, current)
        )
        if fields is None:
            return
        try:
            # PUT replaces the record, so unedited fields go along too
            await self.session.update(record.id, {**current, **fields})
        except ApiError as e:
            await self.report(e)
            return
        self.notify(f"{self.noun.capitalize()} updated.")

    @work
    async def action_delete(self) -> None:
        record = self.selected_record()
        if record is None:
            return
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Delete {self.noun} {record.id}?",
                primary_text="Delete",
                secondary_text="Cancel",
                tone="warning",
            )
        ):
            return
        try:
            await self.session.delete(record.id)
        except ApiError as e:
            await self.report(e)
            return
        self.notify(f"{self.noun.capitalize()} deleted.")
