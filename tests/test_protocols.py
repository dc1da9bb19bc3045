"""Concrete collaborators satisfy the workflow's protocols."""

import tempfile
from pathlib import Path

from chatlogin.auth.keychain import MultiServerTokenStore
from chatlogin.client.chat_client import ChatClient
from chatlogin.network import NetworkProbe
from chatlogin.protocols import (
    AuthBackend,
    AuthenticationNavigator,
    ConnectivityProbe,
    LocalKeyValueStore,
    LoginView,
    ServerRegistry,
    SettingsStore,
    TokenStore,
)
from chatlogin.server.repository import CurrentServerRepository, LocalRepository
from chatlogin.server.settings import SettingsRepository
from chatlogin.ui.console import ConsoleLoginView, ConsoleNavigator


class TestProtocols:
    """Tests for protocol conformance."""

    def setup_method(self):
        """Set up test fixtures."""
        self.local = LocalRepository(path=Path(tempfile.mkdtemp()) / "local.json")

    def test_storage(self):
        assert isinstance(self.local, LocalKeyValueStore)
        assert isinstance(CurrentServerRepository(self.local), ServerRegistry)
        assert isinstance(SettingsRepository(self.local), SettingsStore)
        assert isinstance(MultiServerTokenStore(), TokenStore)

    def test_backend(self):
        with ChatClient("https://chat.example.com") as client:
            assert isinstance(client, AuthBackend)

    def test_network(self):
        assert isinstance(NetworkProbe(), ConnectivityProbe)

    def test_console_ui(self):
        assert isinstance(ConsoleLoginView(), LoginView)
        assert isinstance(ConsoleNavigator(), AuthenticationNavigator)
