from textual import work
from textual.app import ComposeResult
from textual.widgets import DataTable, Input, Label

from client.http import ApiError
from views.base_screen import BaseScreen


class SearchScreen(BaseScreen):
    """
    One box searching users, posts and products at once.
    Results keep the server's order, grouped by kind.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Input(
            id="input-search", placeholder="Start typing to search something..."
        )
        yield Label("", id="label-result-cnt")
        yield DataTable(id="table-search-result")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("kind", "id", "match", "detail")

        self.query_one("#input-search").focus()

    async def on_input_changed(self, message: Input.Changed) -> None:
        if message.input.id == "input-search":
            self.update_search_result(message.value.strip())

    @work(exclusive=True)
    async def update_search_result(self, query: str) -> None:
        table = self.query_one(DataTable)
        label = self.query_one("#label-result-cnt", Label)

        if not query:
            # the server rejects empty queries, nothing to ask
            table.clear()
            label.update("")
            return

        try:
            result = await self.app.state.search.search(query)
        except ApiError as e:
            label.update(f"[red]{e.message}[/red]")
            return

        rows = [("user", u.id, u.name, u.email) for u in result.users]
        rows += [("post", p.id, p.title, p.content) for p in result.posts]
        rows += [("product", p.id, p.name, p.description) for p in result.products]

        table.clear()
        table.add_rows(rows)
        label.update(f"{result.total} result(s)")
