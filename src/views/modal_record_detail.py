import dataclasses
from typing import Awaitable, Callable, Optional, Sequence

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, MarkdownViewer

from client.http import ApiError
from utils.pure import markdown_attr_table


class RecordDetailModal(ModalScreen[None]):
    """
    Attribute table for one record, plus an optional list of related records
    (a user's posts, a post's comments) loaded on open.
    """

    DEFAULT_CSS = """
    RecordDetailModal {
        align: center middle;
    }
    #div-detail {
        width: 90%;
        height: 90%;
        background: $surface;
    }
    """

    def __init__(
        self,
        title: str,
        record,
        related_title: str = "",
        load_related: Optional[Callable[[], Awaitable[Sequence]]] = None,
        describe_related: Callable[[object], str] = str,
    ) -> None:
        super().__init__()
        self._title = title
        self._record = record
        self._related_title = related_title
        self._load_related = load_related
        self._describe_related = describe_related

    def compose(self) -> ComposeResult:
        with Vertical(id="div-detail"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with Horizontal():
                yield Button("Go Back", id="btn-quit", variant="primary")

    async def on_mount(self) -> None:
        await self.show(self._header())
        if self._load_related:
            self.load_related()

    def _header(self) -> str:
        table = markdown_attr_table(dataclasses.asdict(self._record).items())
        return f"### {self._title}\n\n{table}"

    async def show(self, markdown: str) -> None:
        await self.query_one(MarkdownViewer).document.update(markdown)

    @work(exclusive=True)
    async def load_related(self) -> None:
        try:
            related = await self._load_related()
        except ApiError as e:
            await self.show(f"{self._header()}\n\n**{self._related_title}:** {e.message}")
            return

        if related:
            lines = "\n".join(f"- {self._describe_related(r)}" for r in related)
        else:
            lines = "_none_"
        await self.show(f"{self._header()}\n\n#### {self._related_title}\n\n{lines}")

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(None)
