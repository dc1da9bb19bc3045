"""Terminal front end for the login workflow."""

import logging
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong, please try again."
NO_INTERNET_MESSAGE = "No internet connection."


class Destination(Enum):
    """Where the login flow sent the user."""

    SERVER = "server"
    CHAT_LIST = "chat_list"
    TWO_FA = "two_fa"
    SIGN_UP = "sign_up"


class ConsoleLoginView:
    """Prints login screen signals to the terminal."""

    def __init__(self, output: Callable[[str], None] = print):
        self._out = output
        self.loading = False
        self.login_button_hidden = False
        self.cas_url: Optional[str] = None
        self.cas_token: Optional[str] = None
        self.providers: list[str] = []
        self.sign_up_available = False
        self.errors: list[str] = []

    def show_loading(self) -> None:
        self.loading = True
        # Login button hidden means the CAS page does the signing in
        self._out("Waiting for CAS sign-in..." if self.login_button_hidden else "Signing in...")

    def hide_loading(self) -> None:
        self.loading = False

    def show_message(self, message: str) -> None:
        self.errors.append(message)
        self._out(f"Error: {message}")

    def show_generic_error_message(self) -> None:
        self.show_message(GENERIC_ERROR_MESSAGE)

    def show_no_internet_connection(self) -> None:
        self.show_message(NO_INTERNET_MESSAGE)

    def alert_wrong_username_or_email(self) -> None:
        self.show_message("Please enter your username or email.")

    def alert_wrong_password(self) -> None:
        self.show_message("Please enter your password.")

    # Field visibility has no meaning in a terminal
    def hide_username_or_email_view(self) -> None:
        pass

    def hide_password_view(self) -> None:
        pass

    def hide_sign_up_view(self) -> None:
        self.sign_up_available = False

    def hide_oauth_view(self) -> None:
        pass

    def hide_login_button(self) -> None:
        self.login_button_hidden = True

    def show_sign_up_view(self) -> None:
        self.sign_up_available = True
        self._out("This server accepts new registrations.")

    def show_oauth_view(self) -> None:
        self._out(f"Social login available: {', '.join(self.providers)}")

    def show_cas_view(self, url: str, token: str) -> None:
        self.cas_url = url
        self.cas_token = token
        self._out(f"This server uses CAS. Sign in at:\n  {url}")

    def _enable(self, provider: str) -> None:
        self.providers.append(provider)

    def enable_login_by_facebook(self) -> None:
        self._enable("facebook")

    def enable_login_by_github(self) -> None:
        self._enable("github")

    def enable_login_by_google(self) -> None:
        self._enable("google")

    def enable_login_by_linkedin(self) -> None:
        self._enable("linkedin")

    def enable_login_by_meteor(self) -> None:
        self._enable("meteor")

    def enable_login_by_twitter(self) -> None:
        self._enable("twitter")

    def enable_login_by_gitlab(self) -> None:
        self._enable("gitlab")


class ConsoleNavigator:
    """Records where the flow wants to go next."""

    def __init__(self, output: Callable[[str], None] = print):
        self._out = output
        self.destination: Optional[Destination] = None

    def to_server_screen(self) -> None:
        self.destination = Destination.SERVER
        self._out("Choose a server first (--server).")

    def to_chat_list(self) -> None:
        self.destination = Destination.CHAT_LIST
        self._out("Signed in.")

    def to_two_fa(self, username_or_email: str, password: str) -> None:
        self.destination = Destination.TWO_FA
        logger.info(f"Two-factor challenge for {username_or_email}")
        self._out("This account uses two-factor authentication; finish signing in from the app.")

    def to_sign_up(self) -> None:
        self.destination = Destination.SIGN_UP
