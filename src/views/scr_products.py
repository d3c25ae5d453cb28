from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Label, Select

from client.http import ApiError
from client.models import Product
from client.session import ProductSession
from views.modal_record_form import FormField
from views.scr_collection import CollectionScreen

ALL_CATEGORIES = "__all__"


class ProductsScreen(CollectionScreen):
    """
    Product table with a category filter; picking a category refetches only
    that category, picking "All" goes back to the full list.
    """

    record_type = Product
    noun = "product"
    form_fields = [
        FormField("name", "Name"),
        FormField("price", "Price", "number"),
        FormField("description", "Description"),
        FormField("category", "Category"),
        FormField("image", "Image URL"),
        FormField("stock", "Stock", "integer"),
        FormField("inStock", "In stock", "bool"),
    ]

    def make_session(self) -> ProductSession:
        return ProductSession(self.app.state.products)

    def compose_controls(self) -> ComposeResult:
        with Horizontal(id="div-category"):
            yield Label("Category ")
            yield Select(
                [("All", ALL_CATEGORIES)],
                value=ALL_CATEGORIES,
                allow_blank=False,
                id="select-category",
            )

    def on_mount(self) -> None:
        self._category = ALL_CATEGORIES
        self.load_categories()

    @work(exclusive=True, group="categories")
    async def load_categories(self) -> None:
        try:
            categories = await self.app.state.categories.get_all_categories()
        except ApiError as e:
            self.notify(f"Could not load categories: {e.message}", severity="warning")
            return
        self.query_one("#select-category", Select).set_options(
            [("All", ALL_CATEGORIES)] + [(c.name, c.name) for c in categories]
        )

    @on(Select.Changed, "#select-category")
    def handle_category_changed(self, event: Select.Changed) -> None:
        # set_options re-posts the current value
        if event.value == self._category:
            return
        self._category = event.value
        self.filter_category(event.value)

    @work(group="fetch")
    async def filter_category(self, category) -> None:
        if category in (ALL_CATEGORIES, Select.BLANK):
            await self.session.refetch()
        else:
            await self.session.fetch_by_category(category)
