"""Tests for per-server token storage."""

from unittest.mock import patch

from keyring.errors import KeyringError, PasswordDeleteError

from chatlogin.auth.keychain import MultiServerTokenStore, TokenModel

SERVER = "https://chat.example.com"


class FakeKeyring:
    """In-memory stand-in for the keyring module functions."""

    def __init__(self):
        self.entries = {}

    def set_password(self, service, account, value):
        self.entries[(service, account)] = value

    def get_password(self, service, account):
        return self.entries.get((service, account))

    def delete_password(self, service, account):
        if (service, account) not in self.entries:
            raise PasswordDeleteError("not found")
        del self.entries[(service, account)]


class TestMultiServerTokenStore:
    """Tests for MultiServerTokenStore."""

    def setup_method(self):
        """Set up test fixtures."""
        self.fake = FakeKeyring()
        self.patches = [
            patch("chatlogin.auth.keychain.keyring.set_password", self.fake.set_password),
            patch("chatlogin.auth.keychain.keyring.get_password", self.fake.get_password),
            patch("chatlogin.auth.keychain.keyring.delete_password", self.fake.delete_password),
        ]
        for p in self.patches:
            p.start()
        self.store = MultiServerTokenStore(service_name="chatlogin-test")

    def teardown_method(self):
        """Clean up."""
        for p in self.patches:
            p.stop()

    def test_save_and_load(self):
        token = TokenModel(user_id="user-1", auth_token="auth-xyz")

        assert self.store.save(SERVER, token) is True
        assert self.store.load(SERVER) == token

    def test_new_login_overwrites(self):
        self.store.save(SERVER, TokenModel(user_id="user-1", auth_token="old"))
        self.store.save(SERVER, TokenModel(user_id="user-1", auth_token="new"))

        assert self.store.load(SERVER).auth_token == "new"
        assert len(self.fake.entries) == 1

    def test_one_entry_per_server(self):
        self.store.save(SERVER, TokenModel(user_id="a", auth_token="1"))
        self.store.save("https://other.example.com", TokenModel(user_id="b", auth_token="2"))

        assert self.store.load(SERVER).user_id == "a"
        assert self.store.load("https://other.example.com").user_id == "b"

    def test_load_missing(self):
        assert self.store.load(SERVER) is None

    def test_load_invalid_json(self):
        self.fake.entries[("chatlogin-test", SERVER)] = "not json"

        assert self.store.load(SERVER) is None

    def test_delete(self):
        self.store.save(SERVER, TokenModel(user_id="a", auth_token="1"))

        assert self.store.delete(SERVER) is True
        assert self.store.load(SERVER) is None

    def test_delete_missing_is_ok(self):
        assert self.store.delete(SERVER) is True

    def test_save_keyring_failure(self):
        with patch("chatlogin.auth.keychain.keyring.set_password", side_effect=KeyringError("locked")):
            assert self.store.save(SERVER, TokenModel(user_id="a", auth_token="1")) is False

    def test_token_json(self):
        token = TokenModel(user_id="a", auth_token="1")

        assert TokenModel.from_json(token.to_json()) == token
