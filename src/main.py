from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from utils.logger import get_logger
from utils.messages import QuitRequestedMessage, UserLogoutMessage
from utils.state import GlobalState
from views.scr_login import LoginScreen
from views.scr_posts import PostsScreen
from views.scr_products import ProductsScreen
from views.scr_search import SearchScreen
from views.scr_users import UsersScreen

_logger = get_logger("app")


class RecordStoreApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "users": UsersScreen,
        "posts": PostsScreen,
        "products": ProductsScreen,
        "search": SearchScreen,
    }

    MENU_MODES = {
        "users": "Users",
        "posts": "Posts",
        "products": "Products",
        "search": "Search",
    }

    state: GlobalState

    def __init__(self, state: GlobalState | None = None):
        super().__init__()
        self.state = state or GlobalState()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    def handle_user_logout(self):
        self.state.end_session()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        await self.state.api.aclose()
        self.exit()

    @work
    async def main_flow(self):
        await self.push_screen_wait(LoginScreen())
        _logger.debug(f"Logged in as {self.state.user}")
        await self.switch_mode("users")


if __name__ == "__main__":
    app = RecordStoreApp()
    app.run()
