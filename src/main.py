import sys

from textual import on, work
from textual.app import App, ComposeResult
from textual.widgets import LoadingIndicator

from api.backend import HttpBackend
from core.errors import ConfigurationError
from db import database
from utils.config import load_config
from utils.logger import get_logger
from utils.messages import (
    QueueChangedMessage,
    QuitRequestedMessage,
    SearchChangedMessage,
    SearchFailedMessage,
    UserLoginMessage,
    UserLogoutMessage,
)
from utils.state import GlobalState
from views.scr_labels import LabelScreen
from views.scr_login import LoginScreen

_logger = get_logger(__name__)


class LabelDeskApp(App):
    MODES = {
        "labels": LabelScreen,
    }

    CSS_PATH = "views/labeldesk.tcss"

    state: GlobalState

    def __init__(self, state: GlobalState):
        super().__init__()
        self.state = state

        # core components know nothing about textual, forward their
        # notifications to whatever screen is showing
        self.state.search.add_listener(
            lambda: self._post_to_screen(SearchChangedMessage())
        )
        self.state.search.add_error_listener(
            lambda error: self._post_to_screen(SearchFailedMessage(error))
        )
        self.state.queue.add_listener(
            lambda: self._post_to_screen(QueueChangedMessage())
        )

    def _post_to_screen(self, message) -> None:
        if self.is_running and self.screen_stack:
            self.screen.post_message(message)

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        await self.state.session.restore_session()
        self.main_flow()

    async def on_unmount(self) -> None:
        await self.state.backend.aclose()

    @on(UserLoginMessage)
    def handle_user_login(self):
        session = self.state.session.session
        _logger.info(f"Session ready (location: {session.selected_location or 'default'})")

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.state.session.logout()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.exit()

    @work
    async def main_flow(self):
        if not self.state.session.is_authenticated:
            await self.push_screen_wait(LoginScreen())
        if self.current_mode != "labels":
            await self.switch_mode("labels")


def main() -> None:
    try:
        config = load_config()
    except ConfigurationError as e:
        _logger.error(str(e))
        sys.exit(1)

    database.configure(config.session_db_path)
    app = LabelDeskApp(GlobalState(HttpBackend(config)))
    app.run()


if __name__ == "__main__":
    main()
