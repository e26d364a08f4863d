from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user asks to log out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired when user logged in, so the screens can refresh
    """

    bubble = True


class SearchChangedMessage(Message):
    """
    Fired by the app whenever the search controller notifies: new results,
    page change, or a state change (debouncing, searching, ...)
    """

    bubble = True


class SearchFailedMessage(Message):
    """
    Fired when a debounced search fails, nobody awaited it so the screen shows it
    """

    bubble = True

    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error


class QueueChangedMessage(Message):
    """
    Fired whenever a line is added to or removed from the print queue,
    or a print job starts or ends
    """

    bubble = True
