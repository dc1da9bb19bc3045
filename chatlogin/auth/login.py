"""Login workflow behind the login screen."""

import asyncio
import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Union

from ..client.chat_client import SessionToken
from ..client.http_client import ChatClientError, ChatTwoFactorError
from ..lifecycle import CancelStrategy
from ..server.repository import LocalRepository
from .keychain import TokenModel
from .sso import build_cas_url, generate_correlation_token

if TYPE_CHECKING:
    from ..protocols import (
        AuthBackend,
        AuthenticationNavigator,
        ConnectivityProbe,
        LocalKeyValueStore,
        LoginView,
        ServerRegistry,
        SettingsStore,
        TokenStore,
    )

__all__ = [
    "LoginWorkflow",
    "LoginOutcome",
    "Success",
    "NoToken",
    "TwoFactorRequired",
    "BackendFailure",
    "is_email",
]

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9+._%\-]{1,256}"
    r"@"
    r"[a-zA-Z0-9][a-zA-Z0-9\-]{0,64}"
    r"(\.[a-zA-Z0-9][a-zA-Z0-9\-]{0,25})+"
)


def is_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


@dataclass(frozen=True)
class Success:
    """Token issued and persisted."""

    token: SessionToken


@dataclass(frozen=True)
class NoToken:
    """The server accepted the call but issued no token."""


@dataclass(frozen=True)
class TwoFactorRequired:
    """Credentials were right; a second factor is needed."""

    message: Optional[str] = None


@dataclass(frozen=True)
class BackendFailure:
    """Any other server or client error."""

    message: Optional[str] = None


LoginOutcome = Union[Success, NoToken, TwoFactorRequired, BackendFailure]


class LoginWorkflow:
    """Drives the login screen: what to offer, and what happens on submit.

    UI effects go through ``view`` and ``navigator``. Network work runs as
    tasks on ``strategy`` so it is dropped when the screen is destroyed.
    Blocking collaborator calls are pushed to a worker thread.
    """

    def __init__(
        self,
        view: "LoginView",
        navigator: "AuthenticationNavigator",
        strategy: CancelStrategy,
        server_registry: "ServerRegistry",
        settings_store: "SettingsStore",
        backend: "AuthBackend",
        token_store: "TokenStore",
        local_store: "LocalKeyValueStore",
        connectivity: "ConnectivityProbe",
        token_generator: Callable[[], str] = generate_correlation_token,
    ):
        """Initialize the workflow.

        Args:
            view: Login screen
            navigator: Screen transitions
            strategy: Task scope of the login screen
            server_registry: Source of the current server address
            settings_store: Server capability settings
            backend: Chat server login API
            token_store: Persisted session tokens per server
            local_store: Push token and last username
            connectivity: Internet access check
            token_generator: Produces CAS correlation tokens
        """
        self.view = view
        self.navigator = navigator
        self.strategy = strategy
        self.servers = server_registry
        self.settings = settings_store
        self.backend = backend
        self.tokens = token_store
        self.local = local_store
        self.connectivity = connectivity
        self._token_generator = token_generator

    # ------------------------------------------------------------------
    # Screen setup
    # ------------------------------------------------------------------

    def prepare_login_options(self) -> None:
        """Configure the login screen for the current server."""
        server = self.servers.get()
        if server is None:
            self.navigator.to_server_screen()
            return

        settings = self.settings.get(server)
        if settings is None:
            self.navigator.to_server_screen()
            return

        if settings.cas_enabled:
            # The CAS page replaces every credential field
            self.view.hide_username_or_email_view()
            self.view.hide_password_view()
            self.view.hide_sign_up_view()
            self.view.hide_oauth_view()
            self.view.hide_login_button()

            self.view.show_loading()
            token = self._token_generator()
            self.view.show_cas_view(build_cas_url(settings.cas_login_url, server, token), token)
            return

        if settings.registration_enabled:
            self.view.show_sign_up_view()

        providers = settings.enabled_providers()
        for provider in providers:
            getattr(self.view, f"enable_login_by_{provider}")()
        if providers:
            self.view.show_oauth_view()

    def sign_up(self) -> None:
        self.navigator.to_sign_up()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def authenticate(self, username_or_email: str, password: str) -> Optional[asyncio.Task]:
        """Validate the form and start the login.

        Returns:
            The launched login task, or None if validation stopped it
        """
        server = self.servers.get()
        if server is None:
            self.navigator.to_server_screen()
            return None
        if not username_or_email.strip():
            self.view.alert_wrong_username_or_email()
            return None
        if not password:
            self.view.alert_wrong_password()
            return None

        return self.strategy.launch(self._authenticate(server, username_or_email, password))

    def authenticate_with_sso(self, credential: str) -> asyncio.Task:
        """Claim the session created by a completed CAS redirect."""
        return self.strategy.launch(self._authenticate_with_sso(credential))

    async def _authenticate(self, server: str, username_or_email: str, password: str) -> None:
        if not await self._has_connectivity():
            self.view.show_no_internet_connection()
            return

        with self._loading():
            if is_email(username_or_email):
                method, call = "email", self.backend.login_with_email
            else:
                settings = await asyncio.to_thread(self.settings.get, server)
                if settings is None:
                    logger.warning(f"No settings for {server}, aborting login")
                    self.navigator.to_server_screen()
                    return
                if settings.ldap_enabled:
                    method, call = "LDAP", self.backend.login_with_ldap
                else:
                    method, call = "username", self.backend.login

            logger.info(f"Logging in to {server} by {method}")
            outcome = await self._login(server, call, username_or_email, password)

            if isinstance(outcome, TwoFactorRequired):
                logger.info("Two-factor authentication required")
                self.navigator.to_two_fa(username_or_email, password)
            else:
                self._report(outcome)

    async def _authenticate_with_sso(self, credential: str) -> None:
        if not await self._has_connectivity():
            self.view.show_no_internet_connection()
            return

        with self._loading():
            server = self.servers.get()
            if server is None:
                self.navigator.to_server_screen()
                return
            logger.info(f"Logging in to {server} by CAS")
            self._report(await self._login(server, self.backend.login_with_cas, credential))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _loading(self) -> Iterator[None]:
        """Show the loading state for the duration of the block, on every exit path."""
        self.view.show_loading()
        try:
            yield
        finally:
            self.view.hide_loading()

    async def _has_connectivity(self) -> bool:
        return await asyncio.to_thread(self.connectivity.has_internet_access)

    async def _login(self, server: str, call: Callable, *args: str) -> LoginOutcome:
        """Run one backend login call and persist the session it yields."""
        try:
            token = await asyncio.to_thread(call, *args)
            if token is None:
                return NoToken()
            await self._save_session(server, token)
            return Success(token)
        except ChatTwoFactorError as e:
            return TwoFactorRequired(e.message)
        except ChatClientError as e:
            logger.warning(f"Login to {server} failed: {e.message or 'no message'}")
            return BackendFailure(e.message)
        except Exception:
            logger.exception(f"Unexpected error while logging in to {server}")
            return BackendFailure()

    async def _save_session(self, server: str, token: SessionToken) -> None:
        stored = await asyncio.to_thread(
            self.tokens.save, server, TokenModel(user_id=token.user_id, auth_token=token.auth_token)
        )
        if stored is False:
            logger.warning(f"Token for {server} could not be persisted")

        profile = await asyncio.to_thread(self.backend.me)
        username = (profile or {}).get("username")
        await asyncio.to_thread(self.local.save, LocalRepository.USERNAME_KEY, username)

        await self._register_push_token()

    async def _register_push_token(self) -> None:
        push_token = await asyncio.to_thread(self.local.get, LocalRepository.KEY_PUSH_TOKEN)
        if not push_token:
            # TODO: retry registration once the push subsystem hands us a token
            return
        try:
            await asyncio.to_thread(self.backend.register_push_token, push_token)
        except ChatClientError as e:
            logger.warning(f"Push token registration failed: {e.message or e}")

    def _report(self, outcome: LoginOutcome) -> None:
        if isinstance(outcome, Success):
            logger.info("Login successful")
            self.navigator.to_chat_list()
        elif isinstance(outcome, NoToken):
            self.view.show_generic_error_message()
        elif outcome.message:
            self.view.show_message(outcome.message)
        else:
            self.view.show_generic_error_message()
