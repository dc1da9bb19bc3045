"""chatlogin - command line entry point."""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Optional

from . import __version__
from .auth import LoginWorkflow, MultiServerTokenStore
from .client import ChatClient, ChatClientError
from .config import Config, setup_logging
from .lifecycle import CancelStrategy
from .network import NetworkProbe
from .server import CurrentServerRepository, LocalRepository, SettingsRepository
from .ui import ConsoleLoginView, ConsoleNavigator, Destination

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatlogin",
        description="Sign in to a chat server and store the session token.",
    )
    parser.add_argument("--server", help="Chat server URL (remembered as the current server)")
    parser.add_argument("--user", help="Username or email")
    parser.add_argument("--sso-credential", help="Credential token of a completed CAS sign-in")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


class LoginApp:
    """Wires the login workflow to real storage, network and a terminal UI."""

    def __init__(self, config: Config, local: Optional[LocalRepository] = None):
        self.config = config
        self.local = local or LocalRepository()
        self.servers = CurrentServerRepository(self.local)
        self.settings = SettingsRepository(self.local)
        self.tokens = MultiServerTokenStore()
        self.probe = NetworkProbe(config.connectivity_host, config.connectivity_port)
        self.view = ConsoleLoginView()
        self.navigator = ConsoleNavigator()

    def _client_for(self, server: str) -> ChatClient:
        return ChatClient(
            server,
            push_app_name=self.config.push_app_name,
            timeout=self.config.request_timeout,
        )

    def _refresh_settings(self, server: str, client: ChatClient) -> None:
        try:
            self.settings.refresh(server, client)
        except ChatClientError as e:
            logger.warning(f"Could not refresh settings for {server}: {e}")

    async def run(self, user: Optional[str], sso_credential: Optional[str]) -> Destination:
        server = self.servers.get()
        if server is None:
            self.navigator.to_server_screen()
            return Destination.SERVER

        strategy = CancelStrategy()
        with self._client_for(server) as client:
            await asyncio.to_thread(self._refresh_settings, server, client)
            workflow = LoginWorkflow(
                view=self.view,
                navigator=self.navigator,
                strategy=strategy,
                server_registry=self.servers,
                settings_store=self.settings,
                backend=client,
                token_store=self.tokens,
                local_store=self.local,
                connectivity=self.probe,
            )
            try:
                if sso_credential:
                    await workflow.authenticate_with_sso(sso_credential)
                else:
                    workflow.prepare_login_options()
                    if self.navigator.destination is not None or self.view.cas_url:
                        # CAS happens in the browser; the token finishes it on the next run
                        if self.view.cas_token:
                            print(f"Then run: chatlogin --sso-credential {self.view.cas_token}")
                        return self.navigator.destination
                    username = user or input("Username or email: ")
                    password = getpass.getpass("Password: ")
                    task = workflow.authenticate(username, password)
                    if task is not None:
                        await task
            finally:
                strategy.cancel()

        return self.navigator.destination


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    config = Config.load()
    setup_logging(args.debug or config.debug_mode)

    app = LoginApp(config)
    if args.server:
        app.servers.save(args.server)

    try:
        destination = asyncio.run(app.run(args.user, args.sso_credential))
    except KeyboardInterrupt:
        sys.exit(130)

    sys.exit(0 if destination == Destination.CHAT_LIST else 1)


if __name__ == "__main__":
    main()
