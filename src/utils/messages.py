from textual.message import Message

from client.session import SessionSnapshot


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user logs out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired after login or registration, so the sidebar can show the user
    """

    bubble = True


class SessionChangedMessage(Message):
    """
    Posted by a collection screen whenever its data session changes state.
    Carries the snapshot the table is re-rendered from.
    """

    bubble = False

    def __init__(self, snapshot: SessionSnapshot) -> None:
        super().__init__()
        self.snapshot = snapshot


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
