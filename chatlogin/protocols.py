"""Protocol types for LoginWorkflow dependencies.

Defines the interfaces that LoginWorkflow requires from its collaborators,
enabling easier testing and looser coupling.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from .auth.keychain import TokenModel
from .client.chat_client import SessionToken
from .server.settings import ServerSettings


@runtime_checkable
class ServerRegistry(Protocol):
    """Knows which server the user is signing in to."""

    def get(self) -> Optional[str]: ...


@runtime_checkable
class SettingsStore(Protocol):
    """Capability snapshot per server."""

    def get(self, server: str) -> Optional[ServerSettings]: ...


@runtime_checkable
class AuthBackend(Protocol):
    """Login calls against the chat server."""

    def login(self, username: str, password: str) -> Optional[SessionToken]: ...

    def login_with_email(self, email: str, password: str) -> Optional[SessionToken]: ...

    def login_with_ldap(self, username: str, password: str) -> Optional[SessionToken]: ...

    def login_with_cas(self, credential_token: str) -> Optional[SessionToken]: ...

    def me(self) -> dict: ...

    def register_push_token(self, token: str) -> None: ...


@runtime_checkable
class TokenStore(Protocol):
    """Session tokens keyed by server address."""

    def save(self, server: str, token: TokenModel) -> bool: ...


@runtime_checkable
class LocalKeyValueStore(Protocol):
    """Plain local app state."""

    def get(self, key: str) -> Optional[Any]: ...

    def save(self, key: str, value: Any) -> bool: ...


@runtime_checkable
class ConnectivityProbe(Protocol):
    def has_internet_access(self) -> bool: ...


@runtime_checkable
class LoginView(Protocol):
    """What the login screen can be told to do."""

    def show_loading(self) -> None: ...

    def hide_loading(self) -> None: ...

    def show_message(self, message: str) -> None: ...

    def show_generic_error_message(self) -> None: ...

    def show_no_internet_connection(self) -> None: ...

    def alert_wrong_username_or_email(self) -> None: ...

    def alert_wrong_password(self) -> None: ...

    def hide_username_or_email_view(self) -> None: ...

    def hide_password_view(self) -> None: ...

    def hide_sign_up_view(self) -> None: ...

    def hide_oauth_view(self) -> None: ...

    def hide_login_button(self) -> None: ...

    def show_sign_up_view(self) -> None: ...

    def show_oauth_view(self) -> None: ...

    def show_cas_view(self, url: str, token: str) -> None: ...

    def enable_login_by_facebook(self) -> None: ...

    def enable_login_by_github(self) -> None: ...

    def enable_login_by_google(self) -> None: ...

    def enable_login_by_linkedin(self) -> None: ...

    def enable_login_by_meteor(self) -> None: ...

    def enable_login_by_twitter(self) -> None: ...

    def enable_login_by_gitlab(self) -> None: ...


@runtime_checkable
class AuthenticationNavigator(Protocol):
    """Screens the login flow can move to."""

    def to_server_screen(self) -> None: ...

    def to_chat_list(self) -> None: ...

    def to_two_fa(self, username_or_email: str, password: str) -> None: ...

    def to_sign_up(self) -> None: ...
