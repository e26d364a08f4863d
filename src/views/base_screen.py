from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, Static

from utils.messages import UserLogoutMessage
from views.modal_dialog import DialogModal, QuitDialogModal


def _user_display_name(user) -> str:
    if isinstance(user, dict):
        for key in ("name", "username", "email"):
            if user.get(key):
                return str(user[key])
    if user:
        return str(user)
    return "-"


class Sidebar(Container):
    def compose(self) -> ComposeResult:
        yield Label("User Info", id="label-info-1")
        yield Static("", id="static-userinfo")
        yield Button("Log out", id="btn-logout", variant="error")

    def on_mount(self):
        self.refresh_user_info()

    def refresh_user_info(self) -> None:
        session = self.app.state.session.session
        self.query_one("#static-userinfo", Static).update(
            f"User: {_user_display_name(session.user)}\n"
            f"Location: {session.selected_location or 'Default'}"
        )

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self):
        if not await self.app.push_screen_wait(
            DialogModal(
                "Are you sure you want to log out?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            return

        self.post_message(UserLogoutMessage())


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "Labels",
        show_sidebar: bool = True,
    ) -> None:
        self.app.title = "Label Desk"
        self.sub_title = header_sub_title
        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    @on(ScreenResume)
    def handle_screen_resume(self):
        for sidebar in self.query(Sidebar):
            sidebar.refresh_user_info()

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
