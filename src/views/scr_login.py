from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Checkbox, Input, Label, Select

from core.errors import AuthenticationFailed
from utils.logger import get_logger
from utils.messages import UserLoginMessage
from views.base_screen import BaseScreen
from views.modal_dialog import QuitDialogModal

_logger = get_logger(__name__)


class LoginScreen(BaseScreen):
    """
    Dismissed once the operator has a session.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-login"):
            yield Label("", id="label-login-error")
            yield Label("Location (Optional)")
            yield Select(
                [],
                prompt="Use Default Location",
                allow_blank=True,
                id="select-location",
            )
            yield Label("Username")
            yield Input(id="input-login-user")
            yield Label("Password")
            yield Input(placeholder="*********", password=True, id="input-login-pwd")
            yield Checkbox("Show password", id="chk-show-pwd")
            with Horizontal(id="div-login-btns"):
                yield Button("Quit", id="btn-quit")
                yield Button("Login", id="btn-login", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-user").focus()
        self.load_locations()

    @work(exclusive=True, group="locations")
    async def load_locations(self) -> None:
        locations = await self.app.state.load_locations()
        self.query_one("#select-location", Select).set_options(
            [(loc.label, loc.value) for loc in locations]
        )

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()

    @on(Checkbox.Changed, "#chk-show-pwd")
    def handle_show_password(self, event: Checkbox.Changed) -> None:
        self.query_one("#input-login-pwd", Input).password = not event.value

    def _selected_location(self):
        value = self.query_one("#select-location", Select).value
        return value if isinstance(value, str) and value else None

    def _set_error(self, text: str) -> None:
        self.query_one("#label-login-error", Label).update(text)

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True, group="login")
    async def handle_login_submit(self) -> None:
        username = self.query_one("#input-login-user", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value

        if not username or not pwd:
            self._set_error("Username or password cannot be empty!")
            return

        btn = self.query_one("#btn-login", Button)
        btn.disabled = True
        btn.label = "Logging in..."
        self._set_error("")
        try:
            await self.app.state.session.login(
                username, pwd, self._selected_location()
            )
        except AuthenticationFailed as e:
            self._set_error(str(e))
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            return
        finally:
            btn.disabled = False
            btn.label = "Login"

        self.notify(f"Hello {username}!")
        self.app.post_message(UserLoginMessage())
        self.dismiss()

    @on(Button.Pressed, "#btn-quit")
    def handle_quit_(self) -> None:
        self.app.push_screen(QuitDialogModal())
